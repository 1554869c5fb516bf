"""
Email notifications for Buburuebi Healthcare.

All functions are synchronous. Composition (templates -> subject, text,
HTML) is separate from dispatch so the booking API can treat delivery as
best-effort.

Public API:
  compose_booking_confirmation(booking)  -> EmailContent
  DjangoEmailDispatcher().send(email)    -> sends via settings.EMAIL_BACKEND
  send_booking_confirmed(booking)        -> compose + send, never raises
"""
import logging
from dataclasses import dataclass

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailContent:
    to: str
    subject: str
    text_body: str
    html_body: str


def _booking_context(booking) -> dict:
    """Common template context for all booking emails."""
    return {
        'clinic_name':        settings.CLINIC_NAME,
        'customer_name':      booking.customer_name,
        'booking_id':         booking.booking_id,
        'service_name':       booking.service_name,
        'doctor_name':        booking.doctor_name,
        'doctor_email':       booking.doctor_email,
        'doctor_whatsapp':    booking.doctor_whatsapp,
        'time_slot':          booking.time_slot,
        'selected_test':      booking.selected_test,
        'symptoms':           booking.symptoms,
        'location':           booking.location,
        'treatment_location': booking.treatment_location_label,
        'site_url':           settings.SITE_URL,
        'year':               timezone.now().year,
    }


def compose_booking_confirmation(booking) -> EmailContent:
    """Build the patient's confirmation email. Raises ValueError without a recipient."""
    if not booking.customer_email:
        raise ValueError(f'No email address for booking {booking.booking_id}')

    ctx = _booking_context(booking)
    return EmailContent(
        to=booking.customer_email,
        subject=f'Appointment Confirmation - {booking.service_name}',
        text_body=render_to_string('emails/booking_confirmed.txt', ctx),
        html_body=render_to_string('emails/booking_confirmed.html', ctx),
    )


class DjangoEmailDispatcher:
    """Sends through Django's configured mail backend (console in development)."""

    def send(self, email: EmailContent) -> None:
        msg = EmailMultiAlternatives(
            subject=email.subject,
            body=email.text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[email.to],
        )
        msg.attach_alternative(email.html_body, 'text/html')
        msg.send(fail_silently=False)
        logger.info('Email "%s" sent to %s', email.subject, email.to)


def send_booking_confirmed(booking, dispatcher=None) -> bool:
    """
    Compose and send the confirmation email.
    Returns False instead of raising: a booking must never fail because of email.
    """
    dispatcher = dispatcher or DjangoEmailDispatcher()
    try:
        dispatcher.send(compose_booking_confirmation(booking))
    except Exception as exc:
        logger.exception('Failed to send confirmation email for booking %s: %s', booking.booking_id, exc)
        return False
    return True
