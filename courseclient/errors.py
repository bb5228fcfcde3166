from __future__ import annotations

from typing import Optional


class CourseError(Exception):
    """Base for every failure the course API can report."""
    status_code: Optional[int] = None

    def __init__(self, detail: str = "", status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CourseError):
    """400: fix the input and resubmit."""
    status_code = 400


class AuthError(CourseError):
    """401: the credential is gone or no longer valid; sign in again."""
    status_code = 401


class NotFoundError(CourseError):
    """404: unknown username; register instead."""
    status_code = 404


class ConflictError(CourseError):
    """409: username taken; log in instead."""
    status_code = 409


class StorageError(CourseError):
    """5xx: server-side persistence failure."""
    status_code = 500


class RequestFailed(CourseError):
    """Transport failure or timeout; no HTTP status was received."""


STATUS_ERRORS = {
    400: ValidationError,
    401: AuthError,
    404: NotFoundError,
    409: ConflictError,
}


def error_for_status(status_code: int, detail: str) -> CourseError:
    if status_code >= 500:
        return StorageError(detail, status_code)
    cls = STATUS_ERRORS.get(status_code, CourseError)
    return cls(detail, status_code)
