import json
import re
from unittest import mock

from django.core import mail
from django.test import SimpleTestCase

from apps.bookings.exceptions import InvalidInputError
from apps.bookings.gateway import generate_booking_id, submit_booking

from .fakes import RecordingEmailDispatcher, RecordingWhatsAppDispatcher

VALID_PAYLOAD = {
    'name': 'Jane Doe',
    'email': 'jane@x.com',
    'phone': '08012345678',
    'selectedTest': 'blood-test',
    'timeSlot': '09:00 AM',
    'serviceId': 'laboratory',
}


class GatewayTests(SimpleTestCase):

    def test_booking_id_format(self):
        self.assertRegex(generate_booking_id(), r'^BK-\d{13}-[A-Z0-9]{5}$')

    def test_sends_both_notifications(self):
        email, whatsapp = RecordingEmailDispatcher(), RecordingWhatsAppDispatcher()
        receipt = submit_booking(VALID_PAYLOAD, email_dispatcher=email, whatsapp_dispatcher=whatsapp)

        self.assertTrue(receipt.email_sent)
        self.assertTrue(receipt.whatsapp_sent)
        self.assertEqual(email.sent[0].to, 'jane@x.com')
        self.assertEqual(email.sent[0].subject, 'Appointment Confirmation - Medical Laboratory Services')
        handle, text = whatsapp.sent[0]
        self.assertEqual(handle, '2349076167977')
        self.assertIn('Complete Blood Count (CBC)', text)
        self.assertIn(receipt.booking_id, text)

    def test_notification_failures_do_not_fail_the_booking(self):
        receipt = submit_booking(
            VALID_PAYLOAD,
            email_dispatcher=RecordingEmailDispatcher(fail=True),
            whatsapp_dispatcher=RecordingWhatsAppDispatcher(fail=True),
        )
        self.assertTrue(receipt.booking_id.startswith('BK-'))
        self.assertFalse(receipt.email_sent)
        self.assertFalse(receipt.whatsapp_sent)

    def test_missing_fields_compose_nothing(self):
        email, whatsapp = RecordingEmailDispatcher(), RecordingWhatsAppDispatcher()
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != 'serviceId'}
        with self.assertRaisesMessage(InvalidInputError, 'Missing required fields'):
            submit_booking(payload, email_dispatcher=email, whatsapp_dispatcher=whatsapp)
        self.assertEqual(email.sent, [])
        self.assertEqual(whatsapp.sent, [])

    def test_unknown_service_uses_payload_doctor(self):
        whatsapp = RecordingWhatsAppDispatcher()
        payload = dict(VALID_PAYLOAD, serviceId='physio', serviceName='Physiotherapy',
                       doctorName='Dr. Physio', doctorEmail='physio@x.com', doctorWhatsApp='+234 800 000 0000')
        receipt = submit_booking(payload, email_dispatcher=RecordingEmailDispatcher(), whatsapp_dispatcher=whatsapp)
        self.assertEqual(receipt.booking.service_name, 'Physiotherapy')
        self.assertEqual(whatsapp.sent[0][0], '+234 800 000 0000')


class CreateBookingApiTests(SimpleTestCase):

    def post(self, payload, raw=None):
        body = raw if raw is not None else json.dumps(payload)
        return self.client.post('/api/bookings', data=body, content_type='application/json')

    def test_valid_booking(self):
        response = self.post(VALID_PAYLOAD)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['message'], 'Booking confirmed and notifications sent')
        self.assertTrue(re.match(r'^BK-\d+-[A-Z0-9]{5}$', body['bookingId']))

        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(body['bookingId'], mail.outbox[0].body)
        self.assertEqual(mail.outbox[0].alternatives[0][1], 'text/html')

    def test_missing_service_id(self):
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != 'serviceId'}
        response = self.post(payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing required fields'})
        self.assertEqual(mail.outbox, [])

    def test_invalid_data_lists_errors(self):
        response = self.post(dict(VALID_PAYLOAD, email='jane', phone='123'))
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['error'], 'Invalid booking data')
        self.assertEqual(body['errors'], ['Invalid email address', 'Phone must be at least 10 characters'])
        self.assertEqual(mail.outbox, [])

    def test_malformed_json(self):
        response = self.post(None, raw='{not json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Missing required fields')

    def test_non_object_body(self):
        self.assertEqual(self.post(['laboratory']).status_code, 400)

    def test_only_post_is_allowed(self):
        self.assertEqual(self.client.get('/api/bookings').status_code, 405)

    def test_unexpected_failure_is_a_500(self):
        with mock.patch('apps.bookings.api.submit_booking', side_effect=RuntimeError('boom')):
            response = self.post(VALID_PAYLOAD)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Failed to process booking'})
