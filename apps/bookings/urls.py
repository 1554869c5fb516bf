"""
Appointment wizard URLs.

Flow:
  /appointments/?service=<id>               Wizard page (current step)
  /appointments/<id>/details/               Step 1: details -> payment
  /appointments/<id>/payment/               Step 2: slot + payment -> confirmation
  /appointments/<id>/back/                  Step 2: back to details
  /appointments/<id>/confirm/               Step 3: submit booking -> WhatsApp
  /appointments/<id>/reset/                 Start over
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('',                            views.appointment,       name='appointment'),

    # ── Wizard actions ─────────────────────────────────────────────────────────
    path('<slug:service_id>/details/',  views.submit_details,    name='details'),
    path('<slug:service_id>/payment/',  views.confirm_payment,   name='payment'),
    path('<slug:service_id>/back/',     views.go_back,           name='back'),
    path('<slug:service_id>/confirm/',  views.complete_booking,  name='confirm'),
    path('<slug:service_id>/reset/',    views.reset_booking,     name='reset'),
]
