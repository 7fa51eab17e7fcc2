from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Ab5cEBnR3xFQdW9bVc2lMSc2qTkZ8yLhOa7mNpJ4uDsGe1vXwKrYt6iHzP0oUfqE",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

SIMPLE_JWT["SIGNING_KEY"] = env("JWT_SECRET", default=SECRET_KEY)  # noqa: F405
JWT_AUTH_COOKIE_SECURE = False

# EMAIL
# ------------------------------------------------------------------------------
EMAIL_BACKEND = env(
    "DJANGO_EMAIL_BACKEND",
    default="django.core.mail.backends.console.EmailBackend",
)

# LOGGING
# ------------------------------------------------------------------------------
LOGGING["loggers"]["socialhub.realtime"]["level"] = env(  # noqa: F405
    "DJANGO_REALTIME_LOG_LEVEL",
    default="DEBUG",
)
