from dotenv import load_dotenv
load_dotenv()

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-change-me")
DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "orders",
    "payments",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "olkupay.urls"
WSGI_APPLICATION = "olkupay.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# TaraMoney (test/live pair picked by TEST_MODE)
TARAMONEY = {
    "ENABLED": os.getenv("TARAMONEY_ENABLED", "true"),
    "TITLE": os.getenv("TARAMONEY_TITLE", "TaraMoney"),
    "DESCRIPTION": os.getenv("TARAMONEY_DESCRIPTION", "Pay with WhatsApp, Telegram, SMS or Mobile Money"),
    "TEST_MODE": os.getenv("TARAMONEY_TEST_MODE", "true"),
    "API_KEY": os.getenv("TARAMONEY_API_KEY", ""),
    "BUSINESS_ID": os.getenv("TARAMONEY_BUSINESS_ID", ""),
    "TEST_API_KEY": os.getenv("TARAMONEY_TEST_API_KEY", ""),
    "TEST_BUSINESS_ID": os.getenv("TARAMONEY_TEST_BUSINESS_ID", ""),
    "WEBHOOK_SECRET": os.getenv("TARAMONEY_WEBHOOK_SECRET", ""),
    "ENABLE_ORDER_LINKS": os.getenv("TARAMONEY_ENABLE_ORDER_LINKS", "true"),
    "ENABLE_MOBILE_MONEY": os.getenv("TARAMONEY_ENABLE_MOBILE_MONEY", "true"),
    "BASE_URL": os.getenv("TARAMONEY_BASE_URL", "https://www.dklo.co/api/tara"),
    "TIMEOUT": os.getenv("TARAMONEY_TIMEOUT", "30"),
    "SITE_URL": os.getenv("SITE_URL", "http://localhost:8000"),
    "RETURN_URL": os.getenv("TARAMONEY_RETURN_URL", ""),
    "WEBHOOK_URL": os.getenv("TARAMONEY_WEBHOOK_URL", ""),
    "REQUIRE_SIGNED_REFERENCE_MATCH": os.getenv("TARAMONEY_REQUIRE_SIGNED_REFERENCE_MATCH", "false"),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "payments": {
            "handlers": ["console"],
            "level": os.getenv("PAYMENTS_LOG_LEVEL", "INFO"),
        },
    },
}
