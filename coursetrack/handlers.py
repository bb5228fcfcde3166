# coursetrack/handlers.py
# Loaded by DRF settings; must not be imported by the authentication chain.
import logging

from django.db import DatabaseError
from rest_framework.views import exception_handler

from .exceptions import StorageError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    DRF exception handler.
      - DatabaseError that escaped the store is answered as StorageError.
      - 5xx responses are logged with the failing view and the root cause.
    """
    cause = exc.__cause__ if isinstance(exc, StorageError) else exc
    if isinstance(exc, DatabaseError):
        exc = StorageError()

    response = exception_handler(exc, context)
    if response is not None and response.status_code >= 500:
        view = context.get("view")
        logger.error(
            "%s failed: %r",
            type(view).__name__ if view is not None else "view",
            cause,
        )
    return response
