import logging
from flask import Blueprint
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from app.services.errors import ServiceError
from app.utils.responses import error, validation_error_response
from app.utils.validation import schema_errors

errors_bp = Blueprint("errors_bp", __name__)

@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, code=e.code)

@errors_bp.app_errorhandler(ServiceError)
def handle_service_error(e):
    return error(e.message, status=e.status)

@errors_bp.app_errorhandler(ValidationError)
def handle_validation_error(e):
    return validation_error_response(schema_errors(e))

@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    return error(
        "An unexpected error occurred. Please try again later.",
        status=500,
        code=500,
    )
