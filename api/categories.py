from __future__ import annotations

from flask import Blueprint, request

from api.extensions import get_services
from api.pagination import page_payload, parse_query_params
from api.responses import success_response
from models.category import Category
from models.schemas.category import (
    CategoryBulkCreateSchema,
    CategoryCreateSchema,
    CategoryOutSchema,
)
from repositories.category_repository import FILTER_COLUMNS, SORT_COLUMNS
from services.authenticator import Identity
from api.decorators import jwt_required
from utils.exceptions import ForbiddenError, NotFoundError

bp = Blueprint("categories", __name__)

create_schema = CategoryCreateSchema()
bulk_create_schema = CategoryBulkCreateSchema()
out_schema = CategoryOutSchema()
out_list_schema = CategoryOutSchema(many=True)


def visible_category(identity: Identity, category_id: str) -> Category:
    """Defaults are visible to everyone; other users' categories look absent."""
    c = get_services().categories.get_by_id(category_id)
    if c is None or not c.visible_to(identity.user_id):
        raise NotFoundError("Category not found")
    return c


def owned_category(identity: Identity, category_id: str) -> Category:
    c = visible_category(identity, category_id)
    if c.is_default:
        raise ForbiddenError("Default categories cannot be modified")
    return c


@bp.get("/categories")
@jwt_required()
def list_categories(identity):
    """
    List the authenticated user's categories (pagination, sorting, filters)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
      - { in: query, name: sort_by, type: string, default: created_at }
      - { in: query, name: order, type: string, enum: [asc, desc], default: asc }
      - { in: query, name: name, type: string }
      - { in: query, name: type, type: string, enum: [expense, income] }
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    params = parse_query_params(SORT_COLUMNS, FILTER_COLUMNS)
    page = get_services().categories.list_for_user(identity.user_id, params)
    return success_response("Categories retrieved successfully", page_payload(page, out_list_schema))


@bp.get("/categories/default")
@jwt_required()
def list_default_categories(identity):
    """
    List the default categories shared by all users
    ---
    tags: [Categories]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = get_services().categories.get_defaults()
    return success_response("Default categories retrieved successfully", out_list_schema.dump(rows))


@bp.get("/categories/<category_id>")
@jwt_required()
def get_category(identity, category_id: str):
    """
    Get a category by id (own or default)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    c = visible_category(identity, category_id)
    return success_response("Category retrieved successfully", out_schema.dump(c))


@bp.post("/categories")
@jwt_required()
def create_category(identity):
    """
    Create a category
    ---
    tags: [Categories]
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
            name: { type: string, minLength: 2, maxLength: 100 }
            type: { type: string, enum: [expense, income] }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    created = get_services().categories.create_many(identity.user_id, [data])
    return success_response("Category created successfully", out_schema.dump(created[0]), 201)


@bp.post("/categories/multiple")
@jwt_required()
def create_multiple_categories(identity):
    """
    Create several categories at once
    ---
    tags: [Categories]
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
            categories:
              type: array
              items:
                type: object
                properties:
                  name: { type: string }
                  type: { type: string, enum: [expense, income] }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = bulk_create_schema.load(request.get_json(silent=True) or {})
    created = get_services().categories.create_many(identity.user_id, data["categories"])
    return success_response("Categories created successfully", out_list_schema.dump(created), 201)


@bp.put("/categories/<category_id>")
@jwt_required()
def update_category(identity, category_id: str):
    """
    Update one of the user's categories
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, minLength: 2, maxLength: 100 }
            type: { type: string, enum: [expense, income] }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      403: { description: Default categories cannot be modified }
      404: { description: Not found }
    """
    c = owned_category(identity, category_id)
    data = create_schema.load(request.get_json(silent=True) or {})
    c = get_services().categories.update(c, data["name"], data["type"])
    return success_response("Category updated successfully", out_schema.dump(c))


@bp.delete("/categories/<category_id>")
@jwt_required()
def delete_category(identity, category_id: str):
    """
    Soft delete one of the user's categories (sets deleted_at)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      403: { description: Default categories cannot be modified }
      404: { description: Not found }
    """
    c = owned_category(identity, category_id)
    c = get_services().categories.delete(c)
    return success_response("Category deleted successfully", out_schema.dump(c))
