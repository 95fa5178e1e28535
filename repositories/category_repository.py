from __future__ import annotations

from typing import Iterable, List, Mapping

from sqlalchemy.exc import SQLAlchemyError

from models.category import Category, CategoryType
from repositories.pagination import Page, QueryParams, apply_filters, paginate
from utils.exceptions import PersistenceError

SORT_COLUMNS = {
    "id": Category.id,
    "name": Category.name,
    "type": Category.type,
    "created_at": Category.created_at,
    "updated_at": Category.updated_at,
}

FILTER_COLUMNS = {
    "name": Category.name,
    "type": Category.type,
}


class CategoryRepository:
    def __init__(self, storage):
        self._storage = storage

    def _active(self):
        return self._storage.session.query(Category).filter(Category.deleted_at.is_(None))

    def get_defaults(self) -> List[Category]:
        try:
            return (
                self._active()
                .filter(Category.is_default.is_(True), Category.user_id.is_(None))
                .order_by(Category.name.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to get default categories") from exc

    def list_for_user(self, user_id: str, params: QueryParams) -> Page:
        query = self._active().filter(Category.user_id == user_id)
        query = apply_filters(query, params, FILTER_COLUMNS)
        try:
            return paginate(query, params, SORT_COLUMNS, Category.created_at)
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to get categories") from exc

    def get_by_id(self, category_id: str) -> Category | None:
        try:
            return self._active().filter(Category.id == category_id).first()
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to get category") from exc

    def create_many(self, user_id: str, items: Iterable[Mapping]) -> List[Category]:
        categories = [
            Category(name=item["name"], type=CategoryType(item["type"]), user_id=user_id, is_default=False)
            for item in items
        ]
        try:
            for c in categories:
                self._storage.new(c)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to create category") from exc
        return categories

    def update(self, category: Category, name: str, category_type: str) -> Category:
        category.name = name
        category.type = CategoryType(category_type)
        try:
            self._storage.new(category)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to update category") from exc
        return category

    def delete(self, category: Category) -> Category:
        category.soft_delete()
        try:
            self._storage.new(category)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to delete category") from exc
        return category
