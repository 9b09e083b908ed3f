"""Base Django settings for the viewport grid service."""
from __future__ import annotations

from pathlib import Path
import os

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "backend.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "backend.urls"

WSGI_APPLICATION = "backend.wsgi.application"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
    }
}

GRID_PROVIDER = os.environ.get("GRID_PROVIDER", "openmeteo")
if GRID_PROVIDER not in ("openmeteo", "relay"):
    raise ImproperlyConfigured(f"Unknown GRID_PROVIDER {GRID_PROVIDER!r}")
GRID_RELAY_URL = env("GRID_RELAY_URL") if GRID_PROVIDER == "relay" else os.environ.get("GRID_RELAY_URL")
GRID_RELAY_API_KEY = os.environ.get("GRID_RELAY_API_KEY")
OPEN_METEO_URL = os.environ.get("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")

GRID_CACHE_TTL = int(os.environ.get("GRID_CACHE_TTL", "600"))
GRID_CACHE_MAX_ENTRIES = int(os.environ.get("GRID_CACHE_MAX_ENTRIES", "10"))
GRID_POINT_CEILING = int(os.environ.get("GRID_POINT_CEILING", "200"))
GRID_FORECAST_DAYS = int(os.environ.get("GRID_FORECAST_DAYS", "3"))
GRID_HTTP_TIMEOUT = float(os.environ.get("GRID_HTTP_TIMEOUT", "10.0"))

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "root": {"handlers": ["console"], "level": os.environ.get("GRID_LOG_LEVEL", "INFO")},
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
