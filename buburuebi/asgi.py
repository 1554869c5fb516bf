"""
ASGI config. The payment and confirmation steps are async views, so this is
the preferred entry point (e.g. `uvicorn buburuebi.asgi:application`).
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'buburuebi.settings.production')

application = get_asgi_application()
