import os
import sys
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
# Repository root .env wins over backend/.env
root_env = BASE_DIR.parent / ".env"
local_env = BASE_DIR / ".env"
if root_env.exists():
    load_dotenv(root_env)
elif local_env.exists():
    load_dotenv(local_env)

# ---------------------------------------------------------------------------
# Secret key: DJANGO_SECRET_KEY, then SECRET_KEY. The development fallback is
# only accepted while DEBUG is on.
# ---------------------------------------------------------------------------
_candidate_key = os.getenv("DJANGO_SECRET_KEY") or os.getenv("SECRET_KEY") or ""
SECRET_KEY = _candidate_key or "dev-secret-key"
DEBUG = os.getenv("DEBUG", "True") == "True"
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "*").split(",")

if SECRET_KEY == "dev-secret-key" and not DEBUG:
    raise ImproperlyConfigured(
        "SECRET_KEY is missing or using the insecure default. "
        "Set DJANGO_SECRET_KEY or SECRET_KEY."
    )

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "apps.common",
    "apps.users",
    "apps.catalog",
    "apps.carts",
    "apps.orders",
]

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "apps.api.exceptions.global_exception_handler",
    # Prices leave the API as JSON numbers, never strings
    "COERCE_DECIMAL_TO_STRING": False,
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "BeanQuick API",
    "DESCRIPTION": "Order-ahead marketplace: per-user carts and per-vendor order confirmation.",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": r"/api",
    "SERVE_PERMISSIONS": [],
}

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "apps.api.middleware.RequestValidationMiddleware",
]

ROOT_URLCONF = "beanquick.urls"

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

WSGI_APPLICATION = "beanquick.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB", "beanquick"),
        "USER": os.getenv("POSTGRES_USER", "beanquick"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD", "beanquick"),
        "HOST": os.getenv("POSTGRES_HOST", "db"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
    }
}

# Redis cache, fail-open: a cache outage must not block cart requests.
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/1")
CACHE_TTL = int(os.getenv("CACHE_TTL", "300"))
HEALTH_REDIS_URL = os.getenv("REDIS_URL")

CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": REDIS_URL,
        "OPTIONS": {
            "CLIENT_CLASS": "django_redis.client.DefaultClient",
            "IGNORE_EXCEPTIONS": True,
        },
        "KEY_PREFIX": os.getenv("CACHE_KEY_PREFIX", "beanquick"),
        "TIMEOUT": CACHE_TTL,
    }
}

USING_PYTEST = (
    os.getenv("PYTEST_CURRENT_TEST") is not None
    or "pytest" in sys.modules
    or any(os.path.basename(arg).startswith("pytest") for arg in sys.argv)
)

if "test" in sys.argv or USING_PYTEST:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "beanquick-test-cache",
            "TIMEOUT": 60,
        }
    }
    HEALTH_REDIS_URL = None

# ---------------------------------------------------------------------------
# Cart behaviour
# "ignore": SetQuantity against a user without a cart is a silent no-op.
# "error": the same call fails with CART_NOT_FOUND.
# ---------------------------------------------------------------------------
CART_MISSING_POLICY = os.getenv("CART_MISSING_POLICY", "ignore").lower()
if CART_MISSING_POLICY not in ("ignore", "error"):
    raise ImproperlyConfigured("CART_MISSING_POLICY must be 'ignore' or 'error'.")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "apps": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": True},
        "django": {"handlers": ["console"], "level": "INFO", "propagate": True},
    },
}

AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = os.getenv("STATIC_ROOT", str(BASE_DIR / "staticfiles"))
STATICFILES_DIRS = [BASE_DIR / "static"] if (BASE_DIR / "static").exists() else []
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_USER_MODEL = "users.User"
