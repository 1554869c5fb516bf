from io import StringIO
from urllib.parse import unquote

from django.core import mail
from django.core.management import CommandError, call_command
from django.test import SimpleTestCase

from apps.bookings.draft import BookingDraft, TreatmentLocation
from apps.bookings.gateway import BookingConfirmation
from apps.notifications.emails import compose_booking_confirmation, send_booking_confirmed
from apps.notifications.whatsapp import (
    build_doctor_message,
    build_patient_message,
    build_whatsapp_url,
    send_doctor_notification,
)
from apps.services.catalog import get_service


def booking(**overrides):
    values = dict(
        booking_id='BK-1700000000000-AB12C',
        customer_name='Jane Doe',
        customer_email='jane@x.com',
        customer_phone='08012345678',
        service_id='treatment',
        service_name='Treatment & Patient Management',
        time_slot='10:00 AM',
        doctor_name='Dr. Treatment Specialist',
        doctor_email='treatment@buburuebihealthcare.com',
        doctor_whatsapp='2349076167977',
        created_at='2026-01-01T10:00:00+01:00',
        treatment_location=TreatmentLocation.HOME,
        location='No. 5 Ekeki Road, Yenagoa',
    )
    values.update(overrides)
    return BookingConfirmation(**values)


class WhatsAppMessageTests(SimpleTestCase):

    def test_url_encodes_the_text(self):
        url = build_whatsapp_url('+234 907 616 7977', 'Hi & bye?')
        self.assertEqual(url, 'https://wa.me/2349076167977?text=Hi%20%26%20bye%3F')

    def test_patient_message(self):
        lab = get_service('laboratory')
        draft = BookingDraft(name='Jane Doe', email='jane@x.com', time_slot='09:00 AM')
        message = build_patient_message(lab, draft)
        self.assertEqual(
            message,
            'Hello Dr. Lab Specialist, I have booked an appointment for Medical Laboratory Services. '
            'My name is Jane Doe, email: jane@x.com. Booked time: 09:00 AM',
        )
        self.assertIn('Jane Doe', unquote(build_whatsapp_url(lab.doctor_whatsapp, message)))

    def test_doctor_message_includes_optional_sections(self):
        message = build_doctor_message(booking(symptoms='Back pain'))
        self.assertIn('*Symptoms/Concerns:*\nBack pain', message)
        self.assertIn('*Treatment Location:*\nHome Service', message)
        self.assertIn('*Address:*\nNo. 5 Ekeki Road, Yenagoa', message)
        self.assertNotIn('*Selected Test:*', message)

    def test_dispatch_failure_is_reported_not_raised(self):
        self.assertFalse(send_doctor_notification(booking(doctor_whatsapp='')))
        self.assertTrue(send_doctor_notification(booking()))


class EmailTests(SimpleTestCase):

    def test_compose(self):
        email = compose_booking_confirmation(booking())
        self.assertEqual(email.to, 'jane@x.com')
        self.assertEqual(email.subject, 'Appointment Confirmation - Treatment & Patient Management')
        self.assertIn('BK-1700000000000-AB12C', email.text_body)
        self.assertIn('Treatment location: Home Service', email.text_body)
        self.assertIn('Treatment &amp; Patient Management', email.html_body)

    def test_no_recipient(self):
        with self.assertRaises(ValueError):
            compose_booking_confirmation(booking(customer_email=''))

    def test_send_uses_django_mail(self):
        self.assertTrue(send_booking_confirmed(booking()))
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['jane@x.com'])

    def test_send_without_recipient_returns_false(self):
        self.assertFalse(send_booking_confirmed(booking(customer_email='')))
        self.assertEqual(mail.outbox, [])


class PreviewNotificationsCommandTests(SimpleTestCase):

    def test_prints_every_message(self):
        out = StringIO()
        call_command('preview_notifications', '--service', 'treatment', stdout=out)
        output = out.getvalue()
        self.assertIn('Subject: Appointment Confirmation - Treatment & Patient Management', output)
        self.assertIn('New Appointment Booking', output)
        self.assertIn('https://wa.me/2349076167977?text=', output)
        self.assertEqual(mail.outbox, [])

    def test_unknown_service(self):
        with self.assertRaises(CommandError):
            call_command('preview_notifications', '--service', 'surgery', stdout=StringIO())
