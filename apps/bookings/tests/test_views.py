from functools import partial
from unittest import mock
from urllib.parse import unquote

from django.core import mail
from django.test import SimpleTestCase, override_settings

from apps.bookings.client import BookingApiClient
from apps.bookings.sections import CONSULTATION_OPTIONS
from apps.bookings.wizard import Step

from .fakes import django_api_transport, unreachable_transport

JANE = {'name': 'Jane Doe', 'email': 'jane@x.com', 'phone': '08012345678'}


@override_settings(PAYMENT_SIMULATION_DELAY_SECONDS=0)
class WizardViewTests(SimpleTestCase):

    def state(self, service_id):
        response = self.client.get('/appointments/', {'service': service_id})
        self.assertEqual(response.status_code, 200)
        return response.context['state']

    def test_unknown_service_is_404(self):
        self.assertEqual(self.client.get('/appointments/', {'service': 'surgery'}).status_code, 404)
        self.assertEqual(self.client.get('/appointments/').status_code, 404)

    def test_wizard_page_renders_step_one(self):
        response = self.client.get('/appointments/', {'service': 'laboratory'})
        self.assertContains(response, 'Complete Blood Count (CBC)')
        self.assertEqual(response.context['state'].current_step, Step.DETAILS)

    def test_service_id_is_case_insensitive(self):
        self.assertEqual(self.client.get('/appointments/', {'service': 'Dental'}).status_code, 200)

    def test_details_redirect_back_to_the_wizard(self):
        response = self.client.post('/appointments/laboratory/details/', dict(JANE, selected_test='blood-test'))
        self.assertRedirects(response, '/appointments/?service=laboratory')
        self.assertEqual(self.state('laboratory').current_step, Step.PAYMENT)

    def test_home_without_address_stays_on_details(self):
        self.client.post('/appointments/home/details/', dict(JANE, location=''))
        state = self.state('home')
        self.assertEqual(state.current_step, Step.DETAILS)
        self.assertEqual(state.error, 'Please enter your full home address.')

    def test_test_wins_over_symptoms(self):
        self.client.post('/appointments/dental/details/',
                         dict(JANE, selected_test='cleaning', symptoms='Tooth pain at night'))
        state = self.state('dental')
        self.assertEqual(state.form_data.selected_test, 'cleaning')
        self.assertEqual(state.form_data.symptoms, '')

    def test_third_option_is_refused(self):
        self.client.post('/appointments/consultation/details/',
                         dict(JANE, options=list(CONSULTATION_OPTIONS[:3])))
        state = self.state('consultation')
        self.assertEqual(state.current_step, Step.DETAILS)
        self.assertEqual(state.form.checked_options, CONSULTATION_OPTIONS[:2])
        self.assertIn('up to 2 options', state.error)

    def test_home_address_can_be_fixed_after_an_error(self):
        self.client.post('/appointments/home/details/', dict(JANE, location=''))
        self.client.post('/appointments/home/details/', dict(JANE, location='No. 5 Ekeki Road, Yenagoa'))
        state = self.state('home')
        self.assertEqual(state.current_step, Step.PAYMENT)
        self.assertEqual(state.error, '')
        self.assertEqual(state.form_data.location, 'No. 5 Ekeki Road, Yenagoa')

    def test_options_can_be_reduced_after_a_refusal(self):
        self.client.post('/appointments/consultation/details/',
                         dict(JANE, options=list(CONSULTATION_OPTIONS[:3])))
        self.client.post('/appointments/consultation/details/',
                         dict(JANE, options=list(CONSULTATION_OPTIONS[:2])))
        state = self.state('consultation')
        self.assertEqual(state.current_step, Step.PAYMENT)
        self.assertEqual(state.error, '')
        self.assertEqual(state.form_data.checked_options, CONSULTATION_OPTIONS[:2])

    def test_treatment_location_can_be_chosen_after_an_error(self):
        self.client.post('/appointments/treatment/details/', JANE)
        state = self.state('treatment')
        self.assertEqual(state.current_step, Step.DETAILS)
        self.assertTrue(state.error)

        self.client.post('/appointments/treatment/details/', dict(JANE, treatment_location='clinic'))
        state = self.state('treatment')
        self.assertEqual(state.current_step, Step.PAYMENT)
        self.assertEqual(state.error, '')

    def test_treatment_page_has_only_real_location_choices(self):
        response = self.client.get('/appointments/', {'service': 'treatment'})
        field = response.context['details_form'].fields['treatment_location']
        self.assertEqual([value for value, _ in field.choices], ['clinic', 'home'])
        self.assertContains(response, 'value="clinic"')
        self.assertNotContains(response, '---')

    def test_back_and_reset(self):
        self.client.post('/appointments/laboratory/details/', dict(JANE, selected_test='thyroid'))
        self.client.post('/appointments/laboratory/back/')
        state = self.state('laboratory')
        self.assertEqual(state.current_step, Step.DETAILS)
        self.assertEqual(state.form.name, 'Jane Doe')

        self.client.post('/appointments/laboratory/reset/')
        self.assertEqual(self.state('laboratory').form.name, '')

    def test_actions_are_post_only(self):
        self.assertEqual(self.client.get('/appointments/laboratory/reset/').status_code, 405)

    def test_treatment_page_shows_amount_due(self):
        self.client.post('/appointments/treatment/details/', dict(JANE, treatment_location='clinic'))
        response = self.client.get('/appointments/', {'service': 'treatment'})
        self.assertEqual(response.context['amount_due'], '₦15,000')


@override_settings(PAYMENT_SIMULATION_DELAY_SECONDS=0)
class AsyncWizardViewTests(SimpleTestCase):

    async def test_payment_without_slot_shows_error(self):
        await self.async_client.post('/appointments/laboratory/details/', dict(JANE, selected_test='liver'))
        await self.async_client.post('/appointments/laboratory/payment/', {'time_slot': ''})
        response = await self.async_client.get('/appointments/', {'service': 'laboratory'})
        state = response.context['state']
        self.assertEqual(state.current_step, Step.PAYMENT)
        self.assertEqual(state.error, 'Please select an appointment time.')

    async def test_full_booking_redirects_to_whatsapp(self):
        client_with_django_api = partial(BookingApiClient, transport=django_api_transport())
        with mock.patch('apps.bookings.views.BookingApiClient', client_with_django_api):
            await self.async_client.post('/appointments/laboratory/details/', dict(JANE, selected_test='blood-test'))
            await self.async_client.post('/appointments/laboratory/payment/', {'time_slot': '09:00 AM'})
            response = await self.async_client.post('/appointments/laboratory/confirm/')

        self.assertEqual(response.status_code, 302)
        location = response['Location']
        self.assertTrue(location.startswith('https://wa.me/2349076167977?text='))
        self.assertIn('Jane Doe', unquote(location))
        self.assertIn('09:00 AM', unquote(location))
        self.assertEqual(len(mail.outbox), 1)

        # The finished wizard is cleared for the next booking
        response = await self.async_client.get('/appointments/', {'service': 'laboratory'})
        self.assertEqual(response.context['state'].current_step, Step.DETAILS)

    @override_settings(BOOKING_API_URL='')
    async def test_own_booking_api_is_called_in_process(self):
        await self.async_client.post('/appointments/dental/details/', dict(JANE, selected_test='cleaning'))
        await self.async_client.post('/appointments/dental/payment/', {'time_slot': '10:00 AM'})
        response = await self.async_client.post('/appointments/dental/confirm/')

        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].startswith('https://wa.me/'))
        self.assertEqual(len(mail.outbox), 1)

    async def test_api_failure_keeps_the_confirmation_step(self):
        with mock.patch('apps.bookings.views.BookingApiClient', partial(BookingApiClient, transport=unreachable_transport())):
            await self.async_client.post('/appointments/laboratory/details/', dict(JANE, selected_test='blood-test'))
            await self.async_client.post('/appointments/laboratory/payment/', {'time_slot': '09:00 AM'})
            response = await self.async_client.post('/appointments/laboratory/confirm/')

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/appointments/?service=laboratory')
        response = await self.async_client.get('/appointments/', {'service': 'laboratory'})
        state = response.context['state']
        self.assertEqual(state.current_step, Step.CONFIRM)
        self.assertIn('could not reach', state.error)
