"""WSGI entry point for the UKM PONJA portal.

Production servers import the module-level `application` callable.
"""

from __future__ import annotations

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ukmPonja.settings")

application = get_wsgi_application()
