"""
Production-ready configuration.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

ALLOWED_HOSTS = env_list("DJANGO_ALLOWED_HOSTS")  # type: ignore[name-defined]
CSRF_TRUSTED_ORIGINS = env_list("DJANGO_CSRF_TRUSTED_ORIGINS")  # type: ignore[name-defined]

# Make sure Django knows when it is running behind a load balancer or proxy.
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

if SECRET_KEY == DEFAULT_SECRET_KEY:  # type: ignore[name-defined]  # noqa: F405
    raise RuntimeError("DJANGO_SECRET_KEY debe configurarse en produccion.")
