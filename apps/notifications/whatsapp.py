"""
WhatsApp messages for bookings.

Two messages exist:
  - the doctor notification composed by the API after a booking
    (build_doctor_message), handed to a WhatsApp dispatcher;
  - the patient's pre-filled chat opened in the browser after the wizard
    completes (build_patient_message + build_whatsapp_url).

There is no WhatsApp Business integration yet: LoggingWhatsAppDispatcher
records what would have been sent.

Public API:
  build_doctor_message(booking)            -> str
  build_patient_message(service, draft)    -> str
  build_whatsapp_url(handle, text)         -> 'https://wa.me/<digits>?text=...'
  LoggingWhatsAppDispatcher().send(handle, text)
  send_doctor_notification(booking)        -> compose + send, never raises
"""
import logging
import re
from urllib.parse import quote

logger = logging.getLogger(__name__)

WHATSAPP_URL = 'https://wa.me/{handle}?text={text}'


def normalize_handle(handle: str) -> str:
    """wa.me only accepts the international number as bare digits."""
    return re.sub(r'\D', '', handle or '')


def build_whatsapp_url(handle: str, text: str) -> str:
    return WHATSAPP_URL.format(handle=normalize_handle(handle), text=quote(text, safe=''))


def build_patient_message(service, draft) -> str:
    doctor = re.sub(r'^Dr\.?\s+', '', service.doctor_name or '')
    return (
        f'Hello Dr. {doctor}, I have booked an appointment for {service.name}. '
        f'My name is {draft.name}, email: {draft.email}. '
        f'Booked time: {draft.time_slot}'
    )


def build_doctor_message(booking) -> str:
    """Doctor-facing summary of a booking, in WhatsApp markdown."""
    lines = [
        '📋 *New Appointment Booking*',
        '',
        '*Patient Information:*',
        f'Name: {booking.customer_name}',
        f'Email: {booking.customer_email}',
        f'Phone: {booking.customer_phone}',
        '',
        '*Appointment Details:*',
        f'Service: {booking.service_name}',
        f'Time Slot: {booking.time_slot}',
        f'Booking ID: {booking.booking_id}',
        '',
    ]
    if booking.selected_test:
        lines += ['*Selected Test:*', booking.selected_test, '']
    if booking.symptoms:
        lines += ['*Symptoms/Concerns:*', booking.symptoms, '']
    if booking.treatment_location:
        lines += ['*Treatment Location:*', booking.treatment_location_label, '']
    if booking.location:
        lines += ['*Address:*', booking.location, '']
    lines += [
        '*Booking Confirmation:*',
        'This appointment has been confirmed in the system.',
        'Please contact the patient to confirm or discuss any details.',
    ]
    return '\n'.join(lines)


class LoggingWhatsAppDispatcher:
    """Stand-in dispatcher: logs the message instead of delivering it."""

    def send(self, handle: str, text: str) -> None:
        target = normalize_handle(handle)
        if not target:
            raise ValueError('No WhatsApp number to send to')
        logger.info('WhatsApp message to +%s:\n%s', target, text)


def send_doctor_notification(booking, dispatcher=None) -> bool:
    """
    Compose and dispatch the doctor's WhatsApp notification.
    Returns False instead of raising: notifications are best-effort.
    """
    dispatcher = dispatcher or LoggingWhatsAppDispatcher()
    try:
        dispatcher.send(booking.doctor_whatsapp, build_doctor_message(booking))
    except Exception as exc:
        logger.exception('Failed to send WhatsApp notification for booking %s: %s', booking.booking_id, exc)
        return False
    return True
