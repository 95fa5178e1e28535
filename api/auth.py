"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh-token
- POST /auth/logout
- POST /auth/logout-all

The views only parse the request and shape the response; the session lifecycle
lives in services.session_authority.SessionAuthority.
"""
from __future__ import annotations

from flask import Blueprint, request

from api.extensions import get_services
from api.responses import success_response
from models.schemas.user import RefreshTokenSchema, UserOutSchema
from api.decorators import jwt_required

bp = Blueprint("auth", __name__)

refresh_token_schema = RefreshTokenSchema()
user_out_schema = UserOutSchema()


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, minLength: 2, maxLength: 100 }
            email: { type: string }
            password: { type: string, minLength: 6 }
    responses:
      201:
        description: Created (returns user, token and refresh_token)
      400:
        description: Validation error
      409:
        description: Email already exists
    """
    payload = _json_body()
    result = get_services().sessions.register(
        name=payload.get("name"),
        email=payload.get("email"),
        password=payload.get("password"),
    )
    return success_response(
        "User registered successfully",
        {
            "user": user_out_schema.dump(result.user),
            "token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        },
        201,
    )


@bp.post("/login")
def login():
    """
    Login: return token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: true
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Validation error
      401:
        description: Invalid email or password
    """
    payload = _json_body()
    tokens = get_services().sessions.login(email=payload.get("email"), password=payload.get("password"))
    return success_response(
        "Login successful",
        {"token": tokens.access_token, "refresh_token": tokens.refresh_token},
    )


@bp.post("/refresh-token")
def refresh_token():
    """
    Exchange a refresh token for a new token pair (rotation).
    The presented refresh token is revoked and can never be used again.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: true
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns new tokens)
      400:
        description: refresh_token missing
      401:
        description: Invalid, expired or already used refresh token
    """
    data = refresh_token_schema.load(_json_body())
    tokens = get_services().sessions.refresh(data["refresh_token"])
    return success_response(
        "Token refreshed successfully",
        {"token": tokens.access_token, "refresh_token": tokens.refresh_token},
    )


@bp.post("/logout")
@jwt_required()
def logout(identity):
    """
    Logout: revokes the refresh token of the session that authenticated this call
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out (also when the session was already logged out)
      401:
        description: Unauthorized
    """
    revoked = get_services().sessions.logout(identity.jti)
    if revoked == 0:
        return success_response("No active session found or already logged out")
    return success_response("Logout successful")


@bp.post("/logout-all")
@jwt_required()
def logout_all(identity):
    """
    Revoke every active refresh token of the current user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns the number of revoked sessions)
      401:
        description: Unauthorized
    """
    revoked = get_services().sessions.logout_everywhere(identity.user_id)
    return success_response("Logged out from all sessions", {"revoked": revoked})
