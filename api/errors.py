import logging

from flask import current_app
from werkzeug.exceptions import HTTPException, NotFound
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from api.extensions import STORAGE_KEY
from api.responses import error_response

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


def flatten_messages(messages, prefix: str = "") -> list[str]:
    """Turn marshmallow's {field: [msg, ...]} into ["field: msg", ...]."""
    if isinstance(messages, dict):
        out = []
        for field, value in messages.items():
            name = f"{prefix}.{field}" if prefix else str(field)
            if field == "_schema":
                name = prefix
            out.extend(flatten_messages(value, name))
        return out
    if isinstance(messages, (list, tuple)):
        out = []
        for value in messages:
            out.extend(flatten_messages(value, prefix))
        return out
    return [f"{prefix}: {messages}" if prefix else str(messages)]


def _rollback():
    storage = current_app.extensions.get(STORAGE_KEY)
    if storage is not None:
        storage.rollback()


def register_error_handlers(app):
    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("Invalid input data", 400, errors=flatten_messages(err.messages))

    # Integrity errors not already mapped by a view (unique constraints, FK violations)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _rollback()
        lower_msg = str(getattr(err, "orig", err)).lower()
        logger.warning("Integrity error: %s", lower_msg)
        if "unique" in lower_msg:
            return error_response("Unique constraint violated", 409)
        if "foreign key" in lower_msg:
            return error_response("Foreign key constraint failed", 400)
        return error_response("Integrity error", 400)

    # Werkzeug HTTPExceptions (including our domain errors) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        if status >= 500:
            logger.error("%s: %s", err.__class__.__name__, err.description)
            return error_response(INTERNAL_MESSAGE, status)
        # Keep Allow, WWW-Authenticate and the like; the body is JSON, not HTML
        headers = [(k, v) for k, v in err.get_headers() if k.lower() != "content-type"]
        if isinstance(err, NotFound) and err.description == NotFound.description:
            return error_response("Resource not found", 404, headers=headers)
        return error_response(err.description or err.name, status, headers=headers)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        _rollback()
        logger.exception("Unhandled exception", exc_info=err)
        return error_response(INTERNAL_MESSAGE, 500)
