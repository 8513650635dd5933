from __future__ import annotations
from functools import wraps

import jwt
from flask import request, g, current_app

from utils.exceptions import AuthError
from utils.security import decode_token

MISSING_TOKEN = "Authorization token missing"
INVALID_TOKEN = "Invalid or expired access token"


def bearer_token() -> str | None:
    """Token part of an 'Authorization: <scheme> <token>' header, if any."""
    parts = request.headers.get("Authorization", "").split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def jwt_required():
    """
    Require a valid access token. On success g.current_user holds
    {"id", "email", "role"} for the rest of the request. Every verification
    failure gets the same message so callers cannot tell the cases apart.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                raise AuthError(MISSING_TOKEN)
            try:
                decoded = decode_token(
                    token,
                    current_app.config["JWT_SECRET"],
                    current_app.config["JWT_ALGORITHM"],
                )
                user_id = int(decoded["sub"])
            except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
                raise AuthError(INVALID_TOKEN)

            g.current_user = {
                "id": user_id,
                "email": decoded.get("email"),
                "role": decoded.get("role"),
            }
            return fn(*args, **kwargs)

        return wrapper

    return decorator
