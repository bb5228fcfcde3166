# coursetrack/exceptions.py
from __future__ import annotations

import functools

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed


class ValidationError(APIException):
    """Malformed input; the caller must correct it and resubmit."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid"


class AuthError(AuthenticationFailed):
    """Missing, invalid or expired credential; the caller must re-authenticate."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credential."
    default_code = "not_authenticated"


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists."
    default_code = "conflict"


class StorageError(APIException):
    """Persistence failure. Opaque to the client and never retried."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Database error."
    default_code = "storage_error"


def storage_errors(func):
    """Re-raise DatabaseError from the wrapped store operation as StorageError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            raise StorageError() from exc
    return wrapper
