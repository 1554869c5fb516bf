"""
Payment step for the booking wizard.

There is no real gateway yet: SimulatedPaymentProcessor models the round
trip as a fixed delay (PAYMENT_SIMULATION_DELAY_SECONDS). A real
integration only has to provide the same coroutine:

    async def charge(draft, service) -> PaymentResult

and raise PaymentError on failure. The wizard treats the call as
pending -> success | failure, and any failure keeps the user on step 2.
"""
import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.utils.crypto import get_random_string

from apps.bookings.draft import TreatmentLocation
from apps.bookings.exceptions import PaymentError
from apps.services.catalog import ServiceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    reference: str
    amount: Decimal = None


def amount_due(service, draft):
    """
    What the patient is asked to pay up front, or None when nothing is due.

      home                       -> non-refundable deposit
      treatment at home          -> deposit
      treatment at the clinic    -> consultation fee
      everything else            -> None (settled at the appointment)
    """
    if service.type == ServiceType.HOME:
        return service.deposit_amount
    if service.type == ServiceType.TREATMENT:
        if draft.treatment_location == TreatmentLocation.HOME:
            return service.deposit_amount
        if draft.treatment_location == TreatmentLocation.CLINIC:
            return service.consultation_fee
    return None


def format_naira(amount) -> str:
    if amount is None:
        return ''
    return f'₦{amount:,.0f}'


class SimulatedPaymentProcessor:
    """Placeholder gateway: waits, then succeeds."""

    def __init__(self, delay=None):
        if delay is None:
            delay = getattr(settings, 'PAYMENT_SIMULATION_DELAY_SECONDS', 1.5)
        self.delay = delay

    async def charge(self, draft, service) -> PaymentResult:
        amount = amount_due(service, draft)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            logger.info('Simulated payment for %s cancelled', service.id)
            raise
        except Exception as exc:
            raise PaymentError('Payment failed. Please try again.') from exc

        reference = f'SIM-{get_random_string(10).upper()}'
        logger.info('Simulated payment %s for %s (%s)', reference, service.id, format_naira(amount) or 'no charge')
        return PaymentResult(reference=reference, amount=amount)
