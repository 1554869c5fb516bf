import asyncio
from dataclasses import replace

from django.test import SimpleTestCase

from apps.bookings.draft import TreatmentLocation
from apps.bookings.exceptions import (
    BookingInProgressError,
    BookingValidationError,
    NetworkError,
    PaymentError,
)
from apps.bookings.sections import CONSULTATION_OPTIONS
from apps.bookings.wizard import (
    MISSING_INFORMATION,
    Back,
    BookingWizard,
    ChooseTimeSlot,
    ChooseTreatmentLocation,
    InputSymptoms,
    PaymentStarted,
    PaymentSucceeded,
    ProceedToPayment,
    Reset,
    SelectTest,
    Step,
    SubmitStarted,
    ToggleOption,
    UpdateDetails,
    WizardState,
    apply,
)
from apps.services.catalog import get_service

from .fakes import DecliningPayment, FakeBookingClient, GatedPayment, InstantPayment

LAB = get_service('laboratory')
CONSULTATION = get_service('consultation')
HOME = get_service('home')
TREATMENT = get_service('treatment')

JANE = UpdateDetails(name='Jane Doe', email='jane@x.com', phone='08012345678')


def run(service, *events, state=None):
    state = state or WizardState.initial(service.id)
    for event in events:
        state = apply(state, event, service)
    return state


def at_payment(service=LAB, *extra):
    return run(service, JANE, SelectTest('blood-test'), *extra, ProceedToPayment())


class ReducerFieldTests(SimpleTestCase):

    def test_selecting_a_test_clears_symptoms(self):
        state = run(LAB, InputSymptoms('Headache'), SelectTest('thyroid'))
        self.assertEqual(state.form.selected_test, 'thyroid')
        self.assertEqual(state.form.symptoms, '')

    def test_typing_symptoms_clears_the_test(self):
        state = run(LAB, SelectTest('thyroid'), InputSymptoms('Headache'))
        self.assertEqual(state.form.selected_test, '')
        self.assertEqual(state.form.symptoms, 'Headache')

    def test_third_option_is_rejected_and_set_is_unchanged(self):
        first, second, third = CONSULTATION_OPTIONS[:3]
        state = run(CONSULTATION, ToggleOption(first), ToggleOption(second), ToggleOption(third))
        self.assertEqual(state.form.checked_options, (first, second))
        self.assertIn('up to 2 options', state.error)

    def test_toggle_again_unchecks(self):
        label = CONSULTATION_OPTIONS[0]
        state = run(CONSULTATION, ToggleOption(label), ToggleOption(label))
        self.assertEqual(state.form.checked_options, ())

    def test_unknown_treatment_location_is_an_error(self):
        state = run(TREATMENT, ChooseTreatmentLocation('moon'))
        self.assertEqual(state.form.treatment_location, '')
        self.assertTrue(state.error)

    def test_field_events_are_ignored_after_step_one(self):
        state = at_payment()
        self.assertEqual(apply(state, SelectTest('thyroid'), LAB), state)
        self.assertEqual(apply(state, JANE, LAB), state)

    def test_unknown_event_raises(self):
        with self.assertRaises(TypeError):
            apply(WizardState.initial(LAB.id), object(), LAB)


class ReducerTransitionTests(SimpleTestCase):

    def test_incomplete_details_stay_on_step_one(self):
        state = run(LAB, UpdateDetails(name='Jane Doe'), ProceedToPayment())
        self.assertEqual(state.current_step, Step.DETAILS)
        self.assertEqual(state.error, 'Please fill in all required fields.')

    def test_editing_details_clears_the_last_error(self):
        state = run(HOME, JANE, ProceedToPayment())
        self.assertEqual(state.error, 'Please enter your full home address.')

        state = run(HOME, UpdateDetails(location='No. 5 Ekeki Road'), state=state)
        self.assertEqual(state.error, '')
        state = run(HOME, ProceedToPayment(), state=state)
        self.assertEqual(state.current_step, Step.PAYMENT)

    def test_proceed_commits_step_one_fields(self):
        state = at_payment()
        self.assertEqual(state.current_step, Step.PAYMENT)
        self.assertEqual(state.form_data.name, 'Jane Doe')
        self.assertEqual(state.form_data.selected_test, 'blood-test')
        self.assertEqual(state.form_data.time_slot, '')

    def test_back_returns_to_details_and_keeps_input(self):
        state = run(LAB, Back(), state=at_payment())
        self.assertEqual(state.current_step, Step.DETAILS)
        self.assertEqual(state.form.name, 'Jane Doe')

    def test_payment_needs_an_available_slot(self):
        state = run(LAB, ChooseTimeSlot('03:00 AM'), PaymentStarted(), state=at_payment())
        self.assertFalse(state.pending)
        self.assertEqual(state.error, 'Please select an appointment time.')

    def test_second_payment_start_is_ignored(self):
        state = run(LAB, ChooseTimeSlot('09:00 AM'), PaymentStarted(), state=at_payment())
        self.assertTrue(state.pending)
        self.assertEqual(apply(state, PaymentStarted(), LAB), state)
        self.assertEqual(apply(state, ChooseTimeSlot('10:00 AM'), LAB), state)

    def test_payment_success_moves_to_confirmation(self):
        state = run(LAB, ChooseTimeSlot('09:00 AM'), PaymentStarted(), state=at_payment())
        state = apply(state, PaymentSucceeded(state.token, 'SIM-1'), LAB)
        self.assertEqual(state.current_step, Step.CONFIRM)
        self.assertTrue(state.payment_completed)
        self.assertEqual(state.form_data.time_slot, '09:00 AM')

    def test_result_with_old_token_is_dropped(self):
        state = run(LAB, ChooseTimeSlot('09:00 AM'), PaymentStarted(), state=at_payment())
        stale = PaymentSucceeded('not-the-token', 'SIM-1')
        self.assertEqual(apply(state, stale, LAB), state)

    def test_reset_gives_a_fresh_session(self):
        before = at_payment()
        after = apply(before, Reset(), LAB)
        self.assertEqual(after.current_step, Step.DETAILS)
        self.assertNotEqual(after.token, before.token)
        self.assertEqual(after.form.name, '')

    def test_submit_requires_name_and_email(self):
        state = WizardState(service_id=LAB.id, current_step=Step.CONFIRM)
        self.assertEqual(apply(state, SubmitStarted(), LAB).error, MISSING_INFORMATION)

    def test_state_round_trips_through_the_session(self):
        state = at_payment()
        self.assertEqual(WizardState.from_dict(state.to_dict()), state)

    def test_unknown_step_is_rejected_on_load(self):
        data = at_payment().to_dict()
        data['current_step'] = 7
        with self.assertRaises(ValueError):
            WizardState.from_dict(data)


class BookingWizardTests(SimpleTestCase):

    def make_wizard(self, service=LAB, payment=None, client=None):
        return BookingWizard(
            service,
            payment_processor=payment or InstantPayment(),
            booking_client=client or FakeBookingClient(),
        )

    async def test_laboratory_booking_end_to_end(self):
        client = FakeBookingClient(booking_id='BK-1700000000000-AB12C')
        wizard = self.make_wizard(client=client)
        wizard.dispatch(JANE)
        wizard.dispatch(SelectTest('blood-test'))
        wizard.dispatch(ProceedToPayment())
        self.assertEqual(wizard.state.current_step, Step.PAYMENT)

        wizard.dispatch(ChooseTimeSlot('09:00 AM'))
        await wizard.confirm_payment()
        self.assertEqual(wizard.state.current_step, Step.CONFIRM)

        outcome = await wizard.complete_booking()
        self.assertEqual(outcome.booking_id, 'BK-1700000000000-AB12C')
        self.assertIn('Jane Doe', outcome.whatsapp_message)
        self.assertIn('09:00 AM', outcome.whatsapp_message)
        self.assertTrue(outcome.whatsapp_url.startswith('https://wa.me/2349076167977?text=Hello%20Dr.%20Lab'))
        self.assertTrue(wizard.state.submitted)
        self.assertEqual(client.submitted[0].selected_test, 'blood-test')

    async def test_home_without_address_is_blocked(self):
        wizard = self.make_wizard(service=HOME)
        wizard.dispatch(JANE)
        wizard.dispatch(UpdateDetails(location=''))
        wizard.dispatch(ProceedToPayment())
        self.assertEqual(wizard.state.current_step, Step.DETAILS)
        self.assertEqual(wizard.state.error, 'Please enter your full home address.')

    async def test_payment_without_slot_raises_validation_error(self):
        wizard = self.make_wizard()
        wizard.state = at_payment()
        with self.assertRaises(BookingValidationError):
            await wizard.confirm_payment()
        self.assertEqual(wizard.state.current_step, Step.PAYMENT)

    async def test_declined_payment_stays_on_step_two(self):
        wizard = self.make_wizard(payment=DecliningPayment())
        wizard.state = run(LAB, ChooseTimeSlot('09:00 AM'), state=at_payment())
        with self.assertRaises(PaymentError):
            await wizard.confirm_payment()
        self.assertEqual(wizard.state.current_step, Step.PAYMENT)
        self.assertFalse(wizard.state.pending)
        self.assertEqual(wizard.state.error, 'Card declined')

    async def test_concurrent_payment_is_refused(self):
        payment = GatedPayment()
        wizard = self.make_wizard(payment=payment)
        wizard.state = run(LAB, ChooseTimeSlot('09:00 AM'), state=at_payment())

        task = asyncio.ensure_future(wizard.confirm_payment())
        await payment.started.wait()
        with self.assertRaises(BookingInProgressError):
            await wizard.confirm_payment()
        payment.release()
        await task
        self.assertEqual(wizard.state.current_step, Step.CONFIRM)

    async def test_late_payment_after_reset_is_discarded(self):
        payment = GatedPayment()
        wizard = self.make_wizard(payment=payment)
        wizard.state = run(LAB, ChooseTimeSlot('09:00 AM'), state=at_payment())

        task = asyncio.ensure_future(wizard.confirm_payment())
        await payment.started.wait()
        fresh = wizard.reset()
        payment.release()
        await task
        self.assertEqual(wizard.state, fresh)
        self.assertFalse(wizard.state.payment_completed)

    async def test_failed_submission_can_be_retried(self):
        client = FakeBookingClient(error=NetworkError('down'))
        wizard = self.make_wizard(client=client)
        wizard.state = run(LAB, ChooseTimeSlot('09:00 AM'), state=at_payment())
        await wizard.confirm_payment()

        with self.assertRaises(NetworkError):
            await wizard.complete_booking()
        self.assertEqual(wizard.state.current_step, Step.CONFIRM)
        self.assertIn('could not reach', wizard.state.error)

        client.error = None
        outcome = await wizard.complete_booking()
        self.assertEqual(outcome.booking_id, client.booking_id)

    async def test_invalid_draft_is_not_submitted(self):
        client = FakeBookingClient()
        wizard = self.make_wizard(client=client)
        state = run(LAB, ChooseTimeSlot('09:00 AM'), state=at_payment())
        state = apply(state, PaymentStarted(), LAB)
        state = apply(state, PaymentSucceeded(state.token), LAB)
        wizard.state = replace(state, form_data=replace(state.form_data, phone='0801'))

        with self.assertRaises(BookingValidationError):
            await wizard.complete_booking()
        self.assertEqual(wizard.state.error, 'Phone must be at least 10 characters')
        self.assertEqual(client.submitted, [])

    async def test_treatment_at_home_books_with_address(self):
        wizard = self.make_wizard(service=TREATMENT)
        wizard.dispatch(JANE)
        wizard.dispatch(ChooseTreatmentLocation(TreatmentLocation.HOME))
        wizard.dispatch(UpdateDetails(location='No. 5 Ekeki Road, Yenagoa'))
        wizard.dispatch(ProceedToPayment())
        wizard.dispatch(ChooseTimeSlot('10:00 AM'))
        await wizard.confirm_payment()
        outcome = await wizard.complete_booking()
        self.assertTrue(outcome.booking_id)
        self.assertEqual(wizard.state.form_data.location, 'No. 5 Ekeki Road, Yenagoa')
