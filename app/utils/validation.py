import re
from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response

UPI_ID_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9]+$")


def is_valid_upi_id(value) -> bool:
    """``localpart@provider``: alphanumerics, dot, underscore and hyphen
    before the ``@``, alphanumerics after it."""
    if not isinstance(value, str):
        return False
    return UPI_ID_PATTERN.fullmatch(value) is not None


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                obj = schema(**(request.get_json(silent=True) or {}))
            except ValidationError as ve:
                return validation_error_response(
                    ve.errors(include_url=False, include_context=False, include_input=False)
                )
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
