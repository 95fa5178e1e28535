from __future__ import annotations

from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from models.category import Category, CategoryType
from models.expense import Expense
from repositories.pagination import Page, QueryParams, apply_filters, paginate
from utils.exceptions import PersistenceError

SORT_COLUMNS = {
    "id": Expense.id,
    "name": Expense.name,
    "amount": Expense.amount,
    "created_at": Expense.created_at,
    "updated_at": Expense.updated_at,
}

FILTER_COLUMNS = {
    "name": Expense.name,
    "category_name": Category.name,
}


class ExpenseRepository:
    def __init__(self, storage):
        self._storage = storage

    def list_for_user(self, user_id: str, params: QueryParams) -> Page:
        query = (
            self._storage.session.query(Expense)
            .join(Category, Expense.category_id == Category.id)
            .filter(Expense.user_id == user_id)
        )
        query = apply_filters(query, params, FILTER_COLUMNS)

        category_type = params.filters.get("category_type")
        if category_type:
            try:
                query = query.filter(Category.type == CategoryType(category_type.strip().lower()))
            except ValueError:
                # unknown type matches nothing
                query = query.filter(Category.id.is_(None))

        try:
            return paginate(query, params, SORT_COLUMNS, Expense.created_at)
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to get expenses") from exc

    def get_by_id(self, expense_id: str) -> Expense | None:
        try:
            return self._storage.get(Expense, expense_id)
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to get expense") from exc

    def create(self, user_id: str, category: Category, name: str, amount: Decimal) -> Expense:
        expense = Expense(name=name, amount=amount, user_id=user_id, category_id=category.id)
        expense.category = category
        try:
            self._storage.new(expense)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to create expense") from exc
        return expense

    def update(self, expense: Expense, category: Category, name: str, amount: Decimal) -> Expense:
        expense.name = name
        expense.amount = amount
        expense.category_id = category.id
        expense.category = category
        try:
            self._storage.new(expense)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to update expense") from exc
        return expense

    def delete(self, expense: Expense) -> None:
        try:
            self._storage.delete(expense)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to delete expense") from exc
