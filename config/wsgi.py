# config/wsgi.py

# WSGI serves HTTP only; realtime updates need the ASGI application
import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
