"""
Submission gateway — turns a finished booking payload into a notified booking.

Runs behind POST /api/bookings. Steps:
  1. Re-validate the payload (never trust the browser)   -> InvalidInputError
  2. Generate a booking id  BK-<epoch ms>-<5 random chars>
  3. Compose + send the patient's confirmation email      (best-effort)
  4. Compose + send the doctor's WhatsApp notification    (best-effort)
  5. Return a BookingReceipt

Nothing is persisted. Notification failures are logged and reported on the
receipt, but never fail the booking: the booking id is the success signal.
"""
import logging
import time
from dataclasses import dataclass

from django.utils import timezone
from django.utils.crypto import get_random_string

from apps.notifications.emails import send_booking_confirmed
from apps.notifications.whatsapp import send_doctor_notification
from apps.services.catalog import get_service

from .draft import BookingDraft, TreatmentLocation
from .exceptions import InvalidInputError
from .validation import validate_booking_data

logger = logging.getLogger(__name__)

MISSING_REQUIRED_FIELDS = 'Missing required fields'
INVALID_BOOKING_DATA = 'Invalid booking data'

_ID_CHARS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'


def generate_booking_id() -> str:
    return f'BK-{int(time.time() * 1000)}-{get_random_string(5, allowed_chars=_ID_CHARS)}'


@dataclass(frozen=True)
class BookingConfirmation:
    booking_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    service_id: str
    service_name: str
    time_slot: str
    doctor_name: str
    doctor_email: str
    doctor_whatsapp: str
    created_at: str
    selected_test: str = ''
    symptoms: str = ''
    location: str = ''
    treatment_location: str = ''

    @property
    def treatment_location_label(self) -> str:
        if self.treatment_location in TreatmentLocation.values:
            return TreatmentLocation(self.treatment_location).label
        return self.treatment_location


@dataclass(frozen=True)
class BookingReceipt:
    booking: BookingConfirmation
    email_sent: bool
    whatsapp_sent: bool

    @property
    def booking_id(self) -> str:
        return self.booking.booking_id


def _confirmation(booking_id: str, draft: BookingDraft, payload: dict) -> BookingConfirmation:
    """Doctor and service details come from the catalog when the service is known."""
    service = get_service(draft.service_id)
    if service is not None:
        service_name = service.name
        doctor = (service.doctor_name, service.doctor_email, service.doctor_whatsapp)
        selected_test = service.test_label(draft.selected_test) if draft.selected_test else ''
    else:
        service_name = payload.get('serviceName') or draft.service_id
        doctor = (
            payload.get('doctorName') or '',
            payload.get('doctorEmail') or '',
            payload.get('doctorWhatsApp') or '',
        )
        selected_test = draft.selected_test

    return BookingConfirmation(
        booking_id=booking_id,
        customer_name=draft.name,
        customer_email=draft.email,
        customer_phone=draft.phone,
        service_id=draft.service_id,
        service_name=service_name,
        time_slot=draft.time_slot,
        doctor_name=doctor[0],
        doctor_email=doctor[1],
        doctor_whatsapp=doctor[2],
        created_at=timezone.now().isoformat(),
        selected_test=selected_test,
        symptoms=draft.symptoms,
        location=draft.location,
        treatment_location=draft.treatment_location,
    )


def submit_booking(payload: dict, email_dispatcher=None, whatsapp_dispatcher=None) -> BookingReceipt:
    """
    Validate `payload` (the JSON body of POST /api/bookings) and send the
    booking notifications.

    Raises InvalidInputError when a required field is missing or the data
    fails validation; no notification is composed in that case.
    """
    draft = BookingDraft.from_payload(payload)

    missing = draft.missing_required()
    if missing:
        logger.info('Booking rejected, missing fields: %s', ', '.join(missing))
        raise InvalidInputError(MISSING_REQUIRED_FIELDS)

    service = get_service(draft.service_id)
    result = validate_booking_data(draft, service.type if service else None)
    if not result.is_valid:
        logger.info('Booking rejected for %s: %s', draft.service_id, '; '.join(result.errors))
        raise InvalidInputError(INVALID_BOOKING_DATA, errors=result.errors)

    booking = _confirmation(generate_booking_id(), draft, payload)
    logger.info('Booking %s accepted: %s at %s for %s', booking.booking_id, booking.service_name, booking.time_slot, booking.customer_name)

    email_sent = send_booking_confirmed(booking, dispatcher=email_dispatcher)
    whatsapp_sent = send_doctor_notification(booking, dispatcher=whatsapp_dispatcher)
    if not (email_sent and whatsapp_sent):
        logger.warning(
            'Booking %s confirmed with incomplete notifications (email=%s, whatsapp=%s)',
            booking.booking_id, email_sent, whatsapp_sent,
        )

    return BookingReceipt(booking=booking, email_sent=email_sent, whatsapp_sent=whatsapp_sent)
