"""
Django settings for Project project.

Hiding behaviour is driven by the HideSiteOptions row edited in the admin;
the HIDE_SITE_* settings below only control how requests are classified.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-hide-site-dev-key")

DEBUG = os.environ.get("DJANGO_DEBUG", "False").lower() == "true"

ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "HideSite",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Needs request.user, keep after AuthenticationMiddleware.
    "HideSite.middleware.HideSiteMiddleware",
]

ROOT_URLCONF = "Project.urls"

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

WSGI_APPLICATION = "Project.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

LOGIN_URL = "/accounts/login/"

# Request classification for the hide-site gate.
HIDE_SITE_ADMIN_PREFIXES = ("/admin/",)
HIDE_SITE_API_PREFIXES = ("/api/",)
HIDE_SITE_SKIP_PREFIXES = ("/static/", "/media/")
HIDE_SITE_LOGIN_PATHS = ()
HIDE_SITE_LOGIN_NEXT = os.environ.get("HIDE_SITE_LOGIN_NEXT", "False").lower() == "true"
HIDE_SITE_HOME_URL = os.environ.get("HIDE_SITE_HOME_URL", "/")
HIDE_SITE_PAGE_URL_NAME = os.environ.get("HIDE_SITE_PAGE_URL_NAME", "")
HIDE_SITE_PAGE_URL_RESOLVER = os.environ.get("HIDE_SITE_PAGE_URL_RESOLVER", "")
HIDE_SITE_CONTENT_RESOLVER = os.environ.get("HIDE_SITE_CONTENT_RESOLVER", "")
HIDE_SITE_TERM_URL_NAMES = ()
HIDE_SITE_ADMIN_PERMISSION = "HideSite.change_hidesiteoptions"
# Used until options are saved in the admin.
HIDE_SITE_OPTIONS = {}

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
        "HideSite": {
            "handlers": ["console"],
            "level": os.environ.get("HIDE_SITE_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "hidesite.startup": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}
