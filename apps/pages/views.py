from django.http import JsonResponse
from django.shortcuts import render

from apps.services.catalog import all_services

from .content import CTA_SLIDES, TESTIMONIALS, VALUES


def home(request):
    """Landing page with the CTA slider, services teaser and testimonials."""
    return render(request, 'index.html', {
        'slides': CTA_SLIDES,
        'testimonials': TESTIMONIALS,
        'services': all_services(),
    })


def about(request):
    """Our story and values."""
    return render(request, 'about.html', {'values': VALUES})


def health(request):
    return JsonResponse({'status': 'ok'})


def error_404(request, exception):
    return render(request, '404.html', status=404)


def error_500(request):
    return render(request, '500.html', status=500)
