from __future__ import annotations

from flask import Blueprint

from api.extensions import get_services
from api.responses import success_response
from models.schemas.user import UserOutSchema
from api.decorators import jwt_required
from utils.exceptions import NotFoundError

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()


@bp.get("/user/profile")
@jwt_required()
def profile(identity):
    """
    Get the profile of the authenticated user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User not found
    """
    user = get_services().users.get_by_id(identity.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return success_response(
        "User profile retrieved successfully",
        {"user": user_out_schema.dump(user)},
    )
