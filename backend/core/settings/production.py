# flake8: noqa
"""
Production environment settings for Saldus.

Extends base settings with maximum security, PostgreSQL, SMTP e-mail,
live Stripe keys and JSON logging for log aggregation.
"""

import logging

from .base import *
from .utils import load_environment_config

# Load environment configuration
config = load_environment_config("production")

# Environment identification
ENVIRONMENT = "production"

# Security settings for production
DEBUG = False
SECRET_KEY = config("SECRET_KEY")
ALLOWED_HOSTS = config(
    "ALLOWED_HOSTS",
    default="api.saldus.app",
    cast=lambda value: [host.strip() for host in value.split(",") if host.strip()],
)

# CORS settings for production
FRONTEND_URL = config("FRONTEND_URL", default="https://saldus.vercel.app")
CORS_ALLOWED_ORIGINS = [FRONTEND_URL]
CORS_ALLOW_ALL_ORIGINS = False

# Security headers for production
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Email configuration for production
EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
EMAIL_HOST = config("EMAIL_HOST")
EMAIL_PORT = config("EMAIL_PORT", default=587, cast=int)
EMAIL_USE_TLS = True
EMAIL_HOST_USER = config("EMAIL_HOST_USER")
EMAIL_HOST_PASSWORD = config("EMAIL_HOST_PASSWORD")
DEFAULT_FROM_EMAIL = config("DEFAULT_FROM_EMAIL", default="noreply@saldus.app")
ACCOUNT_DEFAULT_HTTP_PROTOCOL = "https"

# Stripe live keys
STRIPE_SECRET_KEY = config("STRIPE_SECRET_KEY")
STRIPE_PRICE_ID = config("STRIPE_PRICE_ID")
STRIPE_API_VERSION = config("STRIPE_API_VERSION", default=STRIPE_API_VERSION)

# Plan enforcement and cache lifetimes
SALDUS_FREE_WEEKLY_LIMIT = config("SALDUS_FREE_WEEKLY_LIMIT", default=5, cast=int)
SALDUS_SUBSCRIPTION_TTL_SECONDS = config("SALDUS_SUBSCRIPTION_TTL_SECONDS", default=300, cast=int)
SALDUS_REPORT_CACHE_SECONDS = config("SALDUS_REPORT_CACHE_SECONDS", default=300, cast=int)

# Database configuration for production
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB"),
        "USER": config("POSTGRES_USER"),
        "PASSWORD": config("POSTGRES_PASSWORD"),
        "HOST": config("DB_HOST"),
        "PORT": "5432",
        "CONN_MAX_AGE": 60,  # Connection pooling 1 minute
        "OPTIONS": {
            "connect_timeout": 5,
        },
    }
}

# Shared cache so subscription and report entries survive across workers
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.db.DatabaseCache",
        "LOCATION": "saldus_cache",
    }
}

# Production logging - structured JSON for aggregation
LOG_DIR = config("LOG_DIR", default="/var/log/saldus")
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING["handlers"]["production_file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": os.path.join(LOG_DIR, "production.log"),
    "maxBytes": 1024 * 1024 * 100,  # 100MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

LOGGING["handlers"]["production_errors"] = {
    "level": "ERROR",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": os.path.join(LOG_DIR, "production_errors.log"),
    "maxBytes": 1024 * 1024 * 50,  # 50MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

LOGGING["handlers"]["production_security"] = {
    "level": "WARNING",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": os.path.join(LOG_DIR, "security.log"),
    "maxBytes": 1024 * 1024 * 50,  # 50MB
    "backupCount": 10,
    "formatter": "json",
    "encoding": "utf-8",
}

for logger_name in ["django", "users", "axes", "allauth", "ledger", "billing"]:
    if logger_name in LOGGING["loggers"]:
        LOGGING["loggers"][logger_name]["handlers"] = [
            "console",
            "production_file",
            "production_errors",
        ]
        LOGGING["loggers"][logger_name]["level"] = "INFO"

# Security-specific logging
LOGGING["loggers"]["axes"]["handlers"].append("production_security")
LOGGING["loggers"]["django.security"]["handlers"] = ["production_security"]

# Reduce noise in production
LOGGING["loggers"]["django.db.backends"]["level"] = "ERROR"

logger = logging.getLogger(__name__)
logger.info(
    "Production environment initialized",
    extra={
        "environment": ENVIRONMENT,
        "debug_mode": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "action": "environment_startup",
        "component": "settings",
        "severity": "info",
    },
)
