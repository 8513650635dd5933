"""
Application error taxonomy.

Each error carries the HTTP status and error code used by the JSON error
envelope in api/errors.py. Services raise these close to the source; the
blueprints let them propagate to the registered handlers.
"""
from __future__ import annotations


class ApiError(Exception):
    status = 500
    error = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(ApiError):
    """Malformed or disallowed input (fields, sort, filters, body fields)."""
    status = 400
    error = "BAD_REQUEST"
    default_message = "Bad request"


class AuthError(ApiError):
    """Missing/invalid credentials or tokens."""
    status = 401
    error = "UNAUTHORIZED"
    default_message = "Unauthorized"


class NotFoundError(ApiError):
    status = 404
    error = "NOT_FOUND"
    default_message = "Resource not found"


class StorageError(ApiError):
    """Any persistence failure. The message is never shown to clients."""
    status = 500
    error = "INTERNAL_ERROR"
