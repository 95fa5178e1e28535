from __future__ import annotations

from typing import Iterable

from flask import request, abort

from repositories.pagination import DEFAULT_LIMIT, MAX_LIMIT, Page, QueryParams

RESERVED = {"page", "limit", "sort_by", "order"}


def parse_query_params(sortable: Iterable[str], filterable: Iterable[str],
                       default_sort: str = "created_at") -> QueryParams:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(DEFAULT_LIMIT)))
    except ValueError:
        abort(400, description="page and limit must be integers")
    page = max(page, 1)
    limit = max(1, min(limit, MAX_LIMIT))

    sort_by = request.args.get("sort_by", default_sort)
    if sort_by not in sortable:
        abort(400, description=f"Unsupported sort field. Allowed: {', '.join(sorted(sortable))}")
    order = request.args.get("order", "asc").lower()
    if order not in ("asc", "desc"):
        order = "asc"

    allowed = set(filterable)
    filters = {k: v for k, v in request.args.items() if k not in RESERVED and k in allowed}
    return QueryParams(page=page, limit=limit, sort_by=sort_by, order=order, filters=filters)


def page_payload(page: Page, schema) -> dict:
    return {
        "items": schema.dump(page.items),
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
    }
