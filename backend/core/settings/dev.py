# flake8: noqa
"""
Development environment settings for Saldus.

Extends base settings with a local PostgreSQL database, relaxed security
and verbose file logging.
"""

import logging

from .base import *
from .utils import load_environment_config

# Load environment configuration
config = load_environment_config("development")

# Environment identification
ENVIRONMENT = "development"

# =============================================================================
# SECURITY SETTINGS FOR DEVELOPMENT
# =============================================================================

DEBUG = True
SECRET_KEY = config("SECRET_KEY", default="django-insecure-dev-key-change-in-production")
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# =============================================================================
# CORS SETTINGS FOR DEVELOPMENT
# =============================================================================

CORS_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
CORS_ALLOW_ALL_ORIGINS = True  # Only for development!

FRONTEND_URL = config("FRONTEND_URL", default="http://localhost:5173")

# =============================================================================
# EMAIL CONFIGURATION FOR DEVELOPMENT
# =============================================================================

EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
DEFAULT_FROM_EMAIL = "dev@saldus.local"
ACCOUNT_DEFAULT_HTTP_PROTOCOL = "http"

# =============================================================================
# STRIPE (TEST MODE KEYS)
# =============================================================================

STRIPE_SECRET_KEY = config("STRIPE_SECRET_KEY", default="")
STRIPE_PRICE_ID = config("STRIPE_PRICE_ID", default="")

# Short lifetimes make plan changes visible quickly while testing checkout
SALDUS_SUBSCRIPTION_TTL_SECONDS = config("SALDUS_SUBSCRIPTION_TTL_SECONDS", default=60, cast=int)
SALDUS_REPORT_CACHE_SECONDS = config("SALDUS_REPORT_CACHE_SECONDS", default=30, cast=int)

# =============================================================================
# DATABASE CONFIGURATION FOR DEVELOPMENT
# =============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB", default="saldus"),
        "USER": config("POSTGRES_USER", default="saldus"),
        "PASSWORD": config("POSTGRES_PASSWORD", default="saldus"),
        "HOST": config("DB_HOST", default="localhost"),
        "PORT": "5432",
    }
}

# =============================================================================
# LOGGING FOR DEVELOPMENT
# =============================================================================

os.makedirs(BASE_DIR / "logs", exist_ok=True)

LOGGING["handlers"]["console"]["level"] = "DEBUG"
LOGGING["handlers"]["development_file"] = {
    "level": "DEBUG",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": BASE_DIR / "logs" / "django_dev.log",
    "maxBytes": 1024 * 1024 * 10,  # 10MB
    "backupCount": 5,
    "formatter": "structured",
    "encoding": "utf-8",
}

for logger_name in ["django", "users", "axes", "allauth", "ledger", "billing"]:
    if logger_name in LOGGING["loggers"]:
        LOGGING["loggers"][logger_name]["handlers"] = ["console", "development_file"]
        LOGGING["loggers"][logger_name]["level"] = "DEBUG"

LOGGING["loggers"]["django.db.backends"]["level"] = config(
    "DB_QUERY_LOGGING_LEVEL", default="INFO"
)

# =============================================================================
# ENVIRONMENT STARTUP
# =============================================================================

logger = logging.getLogger(__name__)
logger.info(
    "Development environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "debug_mode": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "stripe_configured": bool(STRIPE_SECRET_KEY),
        "action": "environment_startup",
        "component": "settings",
    },
)
