"""
ASGI config for the hms project.

Only HTTP is served; the API has no websocket surface.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hms.settings")

application = get_asgi_application()
