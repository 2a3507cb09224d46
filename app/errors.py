import logging
from flask import Blueprint
from werkzeug.exceptions import HTTPException
from app.gateway import GatewayError
from app.utils.responses import error, internal_error_response

errors_bp = Blueprint("errors_bp", __name__)

@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, code=e.code)

@errors_bp.app_errorhandler(GatewayError)
def handle_gateway_error(e):
    logging.error("Unhandled gateway error: %s", e.to_dict())
    return error("The data service is unavailable. Please try again.", status=503, code=503)

@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    return internal_error_response()
