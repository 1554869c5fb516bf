"""
URL configuration for the Buburuebi Healthcare website.
"""
from django.conf import settings
from django.urls import path, include

from apps.bookings.api import create_booking
from apps.pages.views import health

urlpatterns = [
    path('', include('apps.pages.urls', namespace='pages')),
    path('services/', include('apps.services.urls', namespace='services')),
    path('appointments/', include('apps.bookings.urls', namespace='bookings')),
    path('api/bookings', create_booking, name='api_bookings'),
    path('health/', health, name='health'),
]

# Custom Error Handlers
handler404 = 'apps.pages.views.error_404'
handler500 = 'apps.pages.views.error_500'

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns
