"""Django settings for the GetSetRide backend.

All deployment specific values are read from the environment. A ``.env`` file
next to ``manage.py`` is loaded first when present.
"""

import os
from datetime import timedelta
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def get_env(var_name, default=None, required=False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = get_env("DJANGO_SECRET_KEY", "django-insecure-getsetride-local-development-key")

DEBUG = get_env("DJANGO_DEBUG", "False").lower() == "true"

ALLOWED_HOSTS = get_env("DJANGO_ALLOWED_HOSTS", "*").split(",")


INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party apps
    "rest_framework",
    "django_filters",
    "corsheaders",
    # Project apps
    "users",
    "cars",
    "bookings",
    "uploads",
    "chatbot",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "getsetride_backend.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "getsetride_backend.wsgi.application"


DATABASES = {
    "default": {
        "ENGINE": get_env("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": get_env("DB_NAME", BASE_DIR / "db.sqlite3"),
        "USER": get_env("DB_USER", ""),
        "PASSWORD": get_env("DB_PASSWORD", ""),
        "HOST": get_env("DB_HOST", ""),
        "PORT": get_env("DB_PORT", ""),
    }
}

AUTH_USER_MODEL = "users.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator", "OPTIONS": {"min_length": 6}},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticatedOrReadOnly",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
    ],
    "EXCEPTION_HANDLER": "getsetride_backend.exceptions.api_exception_handler",
    "COERCE_DECIMAL_TO_STRING": False,
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(days=int(get_env("JWT_ACCESS_TOKEN_DAYS", "7"))),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=30),
    "AUTH_HEADER_TYPES": ("Bearer",),
}

# CORS
CORS_ALLOWED_ORIGINS = get_env("FRONTEND_URL", "http://localhost:5173").split(",")
CORS_ALLOW_CREDENTIALS = True

# Image host
CLOUDINARY_CLOUD_NAME = get_env("CLOUDINARY_CLOUD_NAME", "")
CLOUDINARY_API_KEY = get_env("CLOUDINARY_API_KEY", "")
CLOUDINARY_API_SECRET = get_env("CLOUDINARY_API_SECRET", "")
CLOUDINARY_BASE_URL = get_env("CLOUDINARY_BASE_URL", "https://api.cloudinary.com/v1_1")
CLOUDINARY_FOLDER = get_env("CLOUDINARY_FOLDER", "getsetride/cars")
UPLOAD_MAX_FILE_SIZE = 5 * 1024 * 1024
UPLOAD_MAX_FILES = 6

# Chat assistant
GROQ_API_KEY = get_env("GROQ_API_KEY", "")
GROQ_API_URL = get_env("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
GROQ_MODEL = get_env("GROQ_MODEL", "llama-3.3-70b-versatile")

# Outbound HTTP timeout in seconds
EXTERNAL_API_TIMEOUT = int(get_env("EXTERNAL_API_TIMEOUT", "30"))

LOG_LEVEL = get_env("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "getsetride_backend": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "users": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "cars": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "bookings": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "uploads": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "chatbot": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
