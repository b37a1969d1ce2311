# flake8: noqa
"""
Test settings for Saldus.

In-memory SQLite, local-memory cache and mail outbox, fast password hashing,
no Stripe credentials and quiet logging.
"""

from .base import *

ENVIRONMENT = "test"

DEBUG = False
SECRET_KEY = "django-insecure-test-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "saldus-test",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "test@saldus.local"

AXES_ENABLED = False

FRONTEND_URL = "http://localhost:5173"
STRIPE_SECRET_KEY = ""
STRIPE_PRICE_ID = "price_test_monthly"

REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {"recovery": "1000/hour"}

for logger_config in LOGGING["loggers"].values():
    logger_config["level"] = "CRITICAL"
