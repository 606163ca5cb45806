"""WSGI entrypoint for HTTP-only deployments (no realtime chat)."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "huddle.settings")

application = get_wsgi_application()
