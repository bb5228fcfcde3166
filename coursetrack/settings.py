"""
Settings for the coursetrack project.

Development defaults live here; deployments override them through the
environment:
- COURSETRACK_SECRET_KEY (also signs learner credentials)
- COURSETRACK_DEBUG ("1" to enable)
- COURSETRACK_ALLOWED_HOSTS (comma separated)
- COURSETRACK_DB_PATH (sqlite file)
- COURSE_TASK_COUNT, CREDENTIAL_TTL_DAYS
- LOG_LEVEL, DJANGO_LOG_LEVEL (see coursetrack.log_config)
"""
import os
from pathlib import Path

from .log_config import LOGGING  # noqa: F401

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get(
    "COURSETRACK_SECRET_KEY", "dev-insecure-secret-change-in-production"
)
DEBUG = os.environ.get("COURSETRACK_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("COURSETRACK_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "learners",
    "progress",
]

MIDDLEWARE = [
    "coursetrack.middleware.RequestIDMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "coursetrack.urls"
WSGI_APPLICATION = "coursetrack.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("COURSETRACK_DB_PATH", str(BASE_DIR / "coursetrack.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# Drafts are posted whole as JSON; allow bodies up to 10 MB.
DATA_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

# Course shape: tasks are numbered 1..COURSE_TASK_COUNT.
COURSE_TASK_COUNT = int(os.environ.get("COURSE_TASK_COUNT", "19"))

# Learner credentials (stateless bearer tokens).
CREDENTIAL_SECRET = os.environ.get("CREDENTIAL_SECRET", SECRET_KEY)
CREDENTIAL_ALGORITHM = "HS256"
CREDENTIAL_TTL_DAYS = int(os.environ.get("CREDENTIAL_TTL_DAYS", "30"))

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "learners.authentication.BearerCredentialAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "EXCEPTION_HANDLER": "coursetrack.handlers.api_exception_handler",
    "UNAUTHENTICATED_USER": None,
}
