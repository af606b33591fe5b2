"""
Compatibility wrapper.

The project uses the ``gestionacademia.config`` package to expose settings
per execution environment (development, production, etc). Import everything
from the package so that ``DJANGO_SETTINGS_MODULE=gestionacademia.settings``
keeps working for manage.py, WSGI and the test runner.
"""

from .config import *  # noqa: F401,F403
