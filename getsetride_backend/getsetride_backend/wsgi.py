"""WSGI entry point for the GetSetRide backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'getsetride_backend.settings')

application = get_wsgi_application()
