from django.conf import settings

from apps.services.catalog import all_services


def site(request):
    """Clinic contact details and the service menu, for the header and footer."""
    return {
        'clinic_name': settings.CLINIC_NAME,
        'clinic_phone': settings.CLINIC_PHONE,
        'clinic_whatsapp': settings.CLINIC_WHATSAPP,
        'clinic_email': settings.DEFAULT_FROM_EMAIL,
        'menu_services': all_services(),
    }
