import logging

from flask import current_app
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from api.responses import error_response
from utils.exceptions import AppError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    # Service and repository errors carry their own status
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error("%s: %s", err.__class__.__name__, err.error, exc_info=err)
        return error_response(err.message, err.error, err.status_code, details=err.details)

    # Marshmallow validation errors map to 400
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        # err.messages contains field-level details
        return error_response("Validation error", "Invalid input", 400, details=err.messages)

    # Werkzeug HTTPExceptions (404 routing, 405, abort()) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.name, err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        # In dev, include exception details to speed up debugging
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("Internal error", "An unexpected error occurred", 500, details=details)
