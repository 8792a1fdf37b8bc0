"""
Premise – Django Settings (Infrastructure Only)
===============================================
Django serves as the framework container for the access engine: ORM,
migrations, logging configuration and the JSON views.

Every deployment-specific value is read from the environment.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return default if raw in (None, "") else float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return default if raw in (None, "") else int(raw)


# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("PREMISE_SECRET_KEY", "premise-dev-key-replace-before-deployment")

DEBUG = _env_bool("PREMISE_DEBUG", True)

ALLOWED_HOSTS = [
    h.strip() for h in os.environ.get("PREMISE_ALLOWED_HOSTS", "").split(",") if h.strip()
]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "core.access_store.apps.AccessStoreConfig",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production points PREMISE_DB_* at the shared
# record store.
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("PREMISE_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("PREMISE_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("PREMISE_DB_USER", ""),
        "PASSWORD": os.environ.get("PREMISE_DB_PASSWORD", ""),
        "HOST": os.environ.get("PREMISE_DB_HOST", ""),
        "PORT": os.environ.get("PREMISE_DB_PORT", ""),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Access Engine ─────────────────────────────────────────────
ACCESS_WINDOW_HOURS = _env_float("ACCESS_WINDOW_HOURS", 8)
LIVE_POLL_INTERVAL_SECONDS = _env_float("LIVE_POLL_INTERVAL_SECONDS", 10)
DASHBOARD_POLL_INTERVAL_SECONDS = _env_float("DASHBOARD_POLL_INTERVAL_SECONDS", 30)
LIVE_RECORD_LIMIT = _env_int("LIVE_RECORD_LIMIT", 20)
DASHBOARD_RECENT_LIMIT = _env_int("DASHBOARD_RECENT_LIMIT", 5)

# ── Briefing Service ──────────────────────────────────────────
# Empty URL disables the briefing; the dashboard shows fixed text.
BRIEFING_API_URL = os.environ.get("BRIEFING_API_URL", "")
BRIEFING_MODEL = os.environ.get("BRIEFING_MODEL", "llama3:latest")
BRIEFING_TIMEOUT_SECONDS = _env_float("BRIEFING_TIMEOUT_SECONDS", 20)

# ── Logging ───────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "premise": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
        },
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    },
}
