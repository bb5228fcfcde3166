"""Async client for the coursetrack API: autosaving drafts and task navigation."""
from .api import CourseApi, Identity, ProgressState
from .errors import (
    AuthError,
    ConflictError,
    CourseError,
    NotFoundError,
    RequestFailed,
    StorageError,
    ValidationError,
)
from .navigation import NavigationController
from .scheduler import SaveScheduler, SaveState
from .session import CourseSession
from .words import word_count, word_count_status

__all__ = [
    "AuthError",
    "ConflictError",
    "CourseApi",
    "CourseError",
    "CourseSession",
    "Identity",
    "NavigationController",
    "NotFoundError",
    "ProgressState",
    "RequestFailed",
    "SaveScheduler",
    "SaveState",
    "StorageError",
    "ValidationError",
    "word_count",
    "word_count_status",
]
