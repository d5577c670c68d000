"""
Django settings for the application.

This is the single settings file for all environments. Configuration is driven
by environment variables using django-environ, following the 12-factor app
methodology.

Environment files:
    - .env.development: Development settings (DEBUG=True, PayPro sandbox)
    - .env.production: Production settings (DEBUG=False, hardened security)

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/topics/settings/

For the full list of settings and their values, see:
https://docs.djangoproject.com/en/5.2/ref/settings/
"""

import os
from pathlib import Path

import environ

# =============================================================================
# Path Configuration
# =============================================================================
# Build paths inside the project: BASE_DIR / 'subdir'
BASE_DIR = Path(__file__).resolve().parent.parent

# =============================================================================
# Environment Configuration
# =============================================================================
# Initialize django-environ
env = environ.Env(
    # Set default values and casting for common settings
    DEBUG=(bool, False),  # Default to False for safety
    ALLOWED_HOSTS=(list, []),
    LOG_LEVEL=(str, "INFO"),
)

# Read environment file based on DJANGO_ENV or default to development
# Note: In Docker, env vars are passed directly; .env files are for local dev
env_file = os.environ.get("ENV_FILE", BASE_DIR.parent / ".env.development")
if Path(env_file).exists():
    environ.Env.read_env(env_file)

# =============================================================================
# Core Settings
# =============================================================================
# SECURITY WARNING: keep the secret key used in production secret!
# The default only exists so test runs and local tooling can import settings.
SECRET_KEY = env("SECRET_KEY", default="django-insecure-local-development-key")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG")

ALLOWED_HOSTS = env("ALLOWED_HOSTS")

# =============================================================================
# Application Definition
# =============================================================================
INSTALLED_APPS = [
    # Local apps
    "core",
    "payments",
]

MIDDLEWARE = [
    # Security middleware (should be first)
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

# =============================================================================
# Database Configuration
# =============================================================================
# PayPro is the system of record for subscriptions; this service keeps no
# database. Subscription records are updated through
# PAYPRO_SUBSCRIPTION_UPDATER.
DATABASES = {}

# =============================================================================
# PayPro Configuration
# =============================================================================
# Credentials from the PayPro vendor dashboard (Settings > API / IPN)
PAYPRO_API_BASE_URL = env("PAYPRO_API_BASE_URL", default="https://store.payproglobal.com")
PAYPRO_ACCOUNT_ID = env("PAYPRO_ACCOUNT_ID", default="")
PAYPRO_API_KEY = env("PAYPRO_API_KEY", default="")

# AES key (16/24/32 chars) and IV (16 chars) for dynamic product parameters
PAYPRO_PARAM_KEY = env("PAYPRO_PARAM_KEY", default="")
PAYPRO_PARAM_IV = env("PAYPRO_PARAM_IV", default="")

# Shared secret PayPro mixes into IPN signatures
PAYPRO_IPN_VALIDATION_KEY = env("PAYPRO_IPN_VALIDATION_KEY", default="")

# API timeout in seconds
PAYPRO_API_TIMEOUT_SECONDS = env.int("PAYPRO_API_TIMEOUT_SECONDS", default=10)

# Dotted path to a callable taking a payments.types.SubscriptionUpdate.
# Empty means IPN-driven updates are only logged.
PAYPRO_SUBSCRIPTION_UPDATER = env("PAYPRO_SUBSCRIPTION_UPDATER", default="")

# Dotted path to an ErrorReporter class. Empty means the "errors" logger.
ERROR_REPORTER = env("ERROR_REPORTER", default="")

# =============================================================================
# Exchange Rate Configuration
# =============================================================================
# Used to price checkouts in USD when PayPro doesn't support the currency.
# The URL template receives the base currency as {base}.
EXCHANGE_RATES_API_URL = env(
    "EXCHANGE_RATES_API_URL",
    default="https://open.er-api.com/v6/latest/{base}",
)
EXCHANGE_RATES_TIMEOUT_SECONDS = env.int("EXCHANGE_RATES_TIMEOUT_SECONDS", default=10)

# =============================================================================
# Internationalization
# =============================================================================
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL = env("LOG_LEVEL")

# Log file name determined by service
# Set via LOG_FILE_NAME environment variable in docker-compose.yaml
LOG_FILE_NAME = env("LOG_FILE_NAME", default="django.log")
LOG_DIR = BASE_DIR / "logs"

# Ensure log directory exists (handles local development without Docker)
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "file": {
            # Detailed format for persistent logs with timestamp, level, logger name, and location
            "format": "[{asctime}] {levelname} {name} {module}:{lineno} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "file": {
            # Max 10MB per file, keeps 5 backups
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / LOG_FILE_NAME,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "formatter": "file",
            "encoding": "utf-8",
        },
    },
    "root": {
        "handlers": ["console", "file"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console", "file"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console", "file"],
            "level": "ERROR",
            "propagate": False,
        },
        # Error sink (core.reporting.LoggingErrorReporter)
        "errors": {
            "handlers": ["console", "file"],
            "level": "ERROR",
            "propagate": False,
        },
        "httpx": {
            "handlers": ["console", "file"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

# =============================================================================
# Security Settings (Production Only)
# =============================================================================
# These settings are enforced only when DEBUG=False
if not DEBUG:
    # HTTPS/SSL settings
    SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

    # HSTS (HTTP Strict Transport Security)
    SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=31536000)  # 1 year
    SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool(
        "SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True
    )

    # Additional security headers
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"
