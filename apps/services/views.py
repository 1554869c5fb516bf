from django.shortcuts import render

from apps.services.catalog import all_services


def services_index(request):
    """Catalog of bookable services, each linking into the appointment wizard."""
    return render(request, 'services.html', {'services': all_services()})
