"""
Base settings for the Buburuebi Healthcare website and booking wizard.
"""
from pathlib import Path
from decouple import config, Csv

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Overridden (and required) in production.py
SECRET_KEY = config('SECRET_KEY', default='django-insecure-buburuebi-dev-key')

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,testserver', cast=Csv())

DJANGO_APPS = [
    'django.contrib.staticfiles',
]

LOCAL_APPS = [
    'apps.pages',
    'apps.services',
    'apps.bookings',
    'apps.payments',
    'apps.notifications',
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'buburuebi.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'apps.pages.context_processors.site',
            ],
        },
    },
]

WSGI_APPLICATION = 'buburuebi.wsgi.application'
ASGI_APPLICATION = 'buburuebi.asgi.application'

# No database: bookings are forwarded to notifications, never stored.
DATABASES = {}

# Wizard state lives in a signed cookie, one entry per service.
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_HTTPONLY = True

CSRF_TRUSTED_ORIGINS = config('CSRF_TRUSTED_ORIGINS', default='http://localhost:8000', cast=Csv())

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Africa/Lagos'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATICFILES_DIRS = [BASE_DIR / 'static']
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

# ── Email ──────────────────────────────────────────────────────────────────────
EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
EMAIL_HOST = config('EMAIL_HOST', default='smtp.gmail.com')
EMAIL_PORT = config('EMAIL_PORT', default=587, cast=int)
EMAIL_USE_TLS = True
EMAIL_HOST_USER = config('EMAIL_HOST_USER', default='')
EMAIL_HOST_PASSWORD = config('EMAIL_HOST_PASSWORD', default='')
DEFAULT_FROM_EMAIL = config('DEFAULT_FROM_EMAIL', default='info@buburuebihealthcare.com')

# ── Clinic ─────────────────────────────────────────────────────────────────────
CLINIC_NAME = config('CLINIC_NAME', default='Buburuebi Healthcare')
CLINIC_PHONE = config('CLINIC_PHONE', default='+234 907 616 7977')
CLINIC_WHATSAPP = config('CLINIC_WHATSAPP', default='2349076167977')
SITE_URL = config('SITE_URL', default='http://127.0.0.1:8000')

# ── Booking Wizard ─────────────────────────────────────────────────────────────
PAYMENT_SIMULATION_DELAY_SECONDS = config('PAYMENT_SIMULATION_DELAY_SECONDS', default=1.5, cast=float)
# Absolute URL of an external POST /api/bookings; when empty the site's own
# endpoint is called in-process
BOOKING_API_URL = config('BOOKING_API_URL', default='')
BOOKING_API_TIMEOUT = config('BOOKING_API_TIMEOUT', default=10.0, cast=float)

# ── Logging ────────────────────────────────────────────────────────────────────
LOG_LEVEL = config('LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}
