# coursetrack/log_config.py
import contextvars
import logging
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DJANGO_LOG_LEVEL = os.getenv("DJANGO_LOG_LEVEL", "WARNING").upper()

# Set per request by coursetrack.middleware.RequestIDMiddleware.
current_request_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    "coursetrack_request_id", default="-"
)


class RequestIDFilter(logging.Filter):
    def filter(self, record):
        record.request_id = current_request_id.get()
        return True


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": RequestIDFilter},
    },
    "formatters": {
        "coursetrack": {
            "format": "%(asctime)s %(levelname)-7s %(name)s [%(request_id)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "coursetrack",
            "filters": ["request_id"],
        },
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": DJANGO_LOG_LEVEL, "propagate": False},
        # 5xx are logged once, by coursetrack.handlers
        "django.request": {"handlers": ["console"], "level": "CRITICAL", "propagate": False},
        "coursetrack": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "learners": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "progress": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
