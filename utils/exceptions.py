"""
Application error taxonomy.

Every error raised by the service and repository layers derives from AppError,
which carries the HTTP status the error handlers in api/errors.py answer with.
Nothing here imports Flask, so the services stay usable outside a request.
"""
from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map onto the uniform error envelope."""

    status_code = 500
    message = "Error"

    def __init__(self, error: str | None = None, details: dict | None = None):
        self.error = error or self.message
        self.details = details
        super().__init__(self.error)


class ValidationError(AppError):
    status_code = 400
    message = "Validation error"


class AuthenticationError(AppError):
    status_code = 401
    message = "Authentication failed"


class InvalidTokenError(AuthenticationError):
    """Raised by the token issuer for bad signatures, malformed or expired tokens."""

    message = "Invalid token"


class ForbiddenError(AppError):
    status_code = 403
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    message = "Conflict"


class PersistenceError(AppError):
    status_code = 500
    message = "Storage failure"


class InternalError(AppError):
    status_code = 500
    message = "Internal error"
