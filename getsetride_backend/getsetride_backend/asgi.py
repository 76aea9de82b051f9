"""ASGI entry point for the GetSetRide backend."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'getsetride_backend.settings')

application = get_asgi_application()
