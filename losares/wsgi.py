"""WSGI config for the losares project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "losares.settings")

application = get_wsgi_application()
