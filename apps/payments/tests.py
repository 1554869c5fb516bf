import asyncio
from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from apps.bookings.draft import BookingDraft, TreatmentLocation
from apps.bookings.exceptions import PaymentError
from apps.payments.processor import SimulatedPaymentProcessor, amount_due, format_naira
from apps.services.catalog import get_service


class AmountDueTests(SimpleTestCase):

    def test_home_service_takes_the_deposit(self):
        self.assertEqual(amount_due(get_service('home'), BookingDraft()), Decimal('10500'))

    def test_treatment_depends_on_location(self):
        treatment = get_service('treatment')
        self.assertEqual(amount_due(treatment, BookingDraft(treatment_location=TreatmentLocation.CLINIC)), Decimal('15000'))
        self.assertEqual(amount_due(treatment, BookingDraft(treatment_location=TreatmentLocation.HOME)), Decimal('10500'))
        self.assertIsNone(amount_due(treatment, BookingDraft()))

    def test_nothing_due_for_other_services(self):
        self.assertIsNone(amount_due(get_service('laboratory'), BookingDraft()))

    def test_format_naira(self):
        self.assertEqual(format_naira(Decimal('10500')), '₦10,500')
        self.assertEqual(format_naira(None), '')


class SimulatedPaymentProcessorTests(SimpleTestCase):

    @override_settings(PAYMENT_SIMULATION_DELAY_SECONDS=0)
    async def test_delay_comes_from_settings(self):
        processor = SimulatedPaymentProcessor()
        self.assertEqual(processor.delay, 0)
        result = await processor.charge(BookingDraft(), get_service('home'))
        self.assertRegex(result.reference, r'^SIM-[A-Z0-9]{10}$')
        self.assertEqual(result.amount, Decimal('10500'))

    async def test_cancellation_propagates(self):
        task = asyncio.ensure_future(SimulatedPaymentProcessor(delay=10).charge(BookingDraft(), get_service('home')))
        await asyncio.sleep(0)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

    async def test_unexpected_failure_becomes_payment_error(self):
        with self.assertRaises(PaymentError):
            await SimulatedPaymentProcessor(delay='soon').charge(BookingDraft(), get_service('home'))
