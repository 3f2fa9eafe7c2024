from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from models import storage
from utils.exceptions import ChirpyError, UpstreamFailure

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def _first_message(messages) -> str:
    """Flatten marshmallow's nested messages into one line."""
    if isinstance(messages, dict):
        for field, value in messages.items():
            inner = _first_message(value)
            if field == "_schema":
                return inner
            return f"{field}: {inner}"
    if isinstance(messages, (list, tuple)) and messages:
        return _first_message(messages[0])
    return str(messages) if messages else "Invalid input"


def register_error_handlers(app):
    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response(_first_message(err.messages), 400)

    @app.errorhandler(ChirpyError)
    def handle_chirpy_error(err: ChirpyError):
        if isinstance(err, UpstreamFailure):
            logger.exception("Upstream failure", exc_info=err)
        return error_response(err.message, err.status_code)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        lower_msg = str(getattr(err, "orig", err)).lower()
        if current_app and current_app.debug:
            logger.exception("Integrity error", exc_info=err)
        if "unique" in lower_msg or "duplicate" in lower_msg:
            return error_response("Resource already exists", 409)
        return error_response("Integrity error", 400)

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err: SQLAlchemyError):
        storage.rollback()
        logger.exception("Storage failure", exc_info=err)
        return error_response("An unexpected error occurred", 500)

    # Werkzeug HTTPExceptions (abort(404) etc.) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("An unexpected error occurred", 500)
