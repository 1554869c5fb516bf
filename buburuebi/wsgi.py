"""
WSGI config for the Buburuebi Healthcare website.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'buburuebi.settings.production')

application = get_wsgi_application()
