from functools import wraps
from typing import Optional
from flask import request, g
from .responses import error
from .jwt import decode_token, TokenError
from app.auth import UserContext

SIGN_IN_PATH = "/auth"
SIGN_IN_MESSAGE = "Please sign in to continue"


def current_user() -> Optional[UserContext]:
    return getattr(g, "current_user", None)


def with_current_user(func):
    """Resolve the bearer token into ``g.current_user``.

    A missing header leaves the user as ``None``; the services decide what an
    anonymous caller may do. A present but invalid token is rejected.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        g.current_user = None
        auth = request.headers.get("Authorization", "")
        if auth:
            token = auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth
            try:
                payload = decode_token(token, expected_type="access")
            except TokenError as e:
                return error(str(e), status=401)
            g.current_user = UserContext(user_id=payload["sub"])
        return func(*args, **kwargs)

    return wrapper


def auth_required(func):
    """Reject anonymous callers with a sign-in redirect."""

    @wraps(func)
    @with_current_user
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return sign_in_required()
        return func(*args, **kwargs)

    return wrapper


def sign_in_required():
    return error(SIGN_IN_MESSAGE, status=401, redirect=SIGN_IN_PATH)
