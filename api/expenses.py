from __future__ import annotations

from flask import Blueprint, request

from api.categories import visible_category
from api.extensions import get_services
from api.pagination import page_payload, parse_query_params
from api.responses import success_response
from models.expense import Expense
from models.schemas.expense import ExpenseCreateSchema, ExpenseOutSchema
from repositories.expense_repository import FILTER_COLUMNS, SORT_COLUMNS
from services.authenticator import Identity
from api.decorators import jwt_required
from utils.exceptions import NotFoundError, ValidationError

bp = Blueprint("expenses", __name__)

create_schema = ExpenseCreateSchema()
out_schema = ExpenseOutSchema()
out_list_schema = ExpenseOutSchema(many=True)

FILTERS = list(FILTER_COLUMNS) + ["category_type"]


def owned_expense(identity: Identity, expense_id: str) -> Expense:
    e = get_services().expenses.get_by_id(expense_id)
    if e is None or e.user_id != identity.user_id:
        raise NotFoundError("Expense not found")
    return e


def _load_expense(identity: Identity):
    data = create_schema.load(request.get_json(silent=True) or {})
    try:
        category = visible_category(identity, data["category_id"])
    except NotFoundError:
        raise ValidationError("Invalid category ID", details={"category_id": ["Unknown category."]})
    return data, category


@bp.get("/expenses")
@jwt_required()
def list_expenses(identity):
    """
    List the authenticated user's expenses (pagination, sorting, filters)
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
      - { in: query, name: sort_by, type: string, default: created_at }
      - { in: query, name: order, type: string, enum: [asc, desc], default: asc }
      - { in: query, name: name, type: string }
      - { in: query, name: category_name, type: string }
      - { in: query, name: category_type, type: string, enum: [expense, income] }
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    params = parse_query_params(SORT_COLUMNS, FILTERS)
    page = get_services().expenses.list_for_user(identity.user_id, params)
    return success_response("Expenses retrieved successfully", page_payload(page, out_list_schema))


@bp.get("/expenses/<expense_id>")
@jwt_required()
def get_expense(identity, expense_id: str):
    """
    Get one of the user's expenses
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: expense_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    e = owned_expense(identity, expense_id)
    return success_response("Expense retrieved successfully", out_schema.dump(e))


@bp.post("/expenses")
@jwt_required()
def create_expense(identity):
    """
    Record an expense in one of the user's categories or a default category
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
            amount: { type: number, example: 12.5 }
            category_id: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error or unknown category }
    """
    data, category = _load_expense(identity)
    e = get_services().expenses.create(identity.user_id, category, data["name"], data["amount"])
    return success_response("Expense created successfully", out_schema.dump(e), 201)


@bp.put("/expenses/<expense_id>")
@jwt_required()
def update_expense(identity, expense_id: str):
    """
    Update one of the user's expenses
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: expense_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
            amount: { type: number }
            category_id: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error or unknown category }
      404: { description: Not found }
    """
    e = owned_expense(identity, expense_id)
    data, category = _load_expense(identity)
    e = get_services().expenses.update(e, category, data["name"], data["amount"])
    return success_response("Expense updated successfully", out_schema.dump(e))


@bp.delete("/expenses/<expense_id>")
@jwt_required()
def delete_expense(identity, expense_id: str):
    """
    Delete one of the user's expenses
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: expense_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    e = owned_expense(identity, expense_id)
    payload = out_schema.dump(e)
    get_services().expenses.delete(e)
    return success_response("Expense deleted successfully", payload)
