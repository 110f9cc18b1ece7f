"""
ASGI config for the Codemart backend.

HTTP only; the API has no websocket surface.
"""

import os

from django.core.asgi import get_asgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "codemartBackend.settings")

application = get_asgi_application()
