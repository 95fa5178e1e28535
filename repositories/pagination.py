from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from sqlalchemy import func

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class QueryParams:
    page: int = 1
    limit: int = DEFAULT_LIMIT
    sort_by: str = "created_at"
    order: str = "asc"
    filters: Dict[str, str] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def apply_filters(query, params: QueryParams, filter_columns):
    """Case-insensitive substring match for whitelisted filter keys; others are ignored."""
    for key, value in params.filters.items():
        col = filter_columns.get(key)
        if col is None or value == "":
            continue
        query = query.filter(func.lower(col).like(f"%{value.strip().lower()}%"))
    return query


def paginate(query, params: QueryParams, sort_columns, default_sort) -> Page:
    total = query.count()
    col = sort_columns.get(params.sort_by, default_sort)
    order_by = col.desc() if params.order == "desc" else col.asc()
    rows = query.order_by(order_by).offset(params.offset).limit(params.limit).all()
    return Page(items=rows, total=total, page=params.page, limit=params.limit)
