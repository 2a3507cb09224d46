from .responses import ok, error, validation_error_response, internal_error_response
from .auth import auth_required, with_current_user, current_user, sign_in_required
from .validation import validate_schema, is_valid_upi_id
from .jwt import (
    create_access_token,
    decode_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'internal_error_response',
    'auth_required',
    'with_current_user',
    'current_user',
    'sign_in_required',
    'create_access_token',
    'decode_token',
    'TokenError',
    'validate_schema',
    'is_valid_upi_id',
]
