"""
Booking wizard — the 3-step appointment flow as a state machine.

    DETAILS (1) ──ProceedToPayment──▶ PAYMENT (2) ──payment ok──▶ CONFIRM (3) ──submit ok──▶ submitted
        ▲                                │                             │
        └──────────────Back──────────────┘                             │
        └─────────────────────────────Reset────────────────────────────┘

State is immutable. Every change goes through one reducer:

    apply(state, event, service) -> new state

which never does I/O and never raises; rule violations come back as
`state.error`. The two asynchronous transitions (payment, submission) are
split into Started / Succeeded / Failed events and driven by BookingWizard,
which awaits the collaborator in between.

Staleness: every state carries a `token`, regenerated on Reset. Result
events carry the token that was current when the operation started and are
dropped if it no longer matches, so a late payment or submission result
cannot leak into a fresh session.

The `pending` flag is the per-wizard mutex: a second Started event while one
is in flight is ignored by the reducer and refused by BookingWizard.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field, replace

from django.db import models

from apps.notifications.whatsapp import build_patient_message, build_whatsapp_url

from .draft import BookingDraft, TreatmentLocation
from .exceptions import (
    BookingInProgressError,
    BookingValidationError,
    InvalidInputError,
    NetworkError,
    PaymentError,
    SubmissionError,
    SubmissionTimeoutError,
)
from .sections import OptionsSection, section_for
from .validation import step1_error, validate_booking_data

logger = logging.getLogger(__name__)

PAYMENT_FAILED = 'Payment failed. Please try again.'
MISSING_INFORMATION = 'Missing required information'


class Step(models.IntegerChoices):
    DETAILS = 1, 'Select Service'
    PAYMENT = 2, 'Payment'
    CONFIRM = 3, 'Confirmation'


# ─────────────────────────────────────────────────────────────────────────────
# State
# ─────────────────────────────────────────────────────────────────────────────

def _new_token() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class WizardState:
    service_id: str
    token: str = field(default_factory=_new_token)
    current_step: int = Step.DETAILS
    form: BookingDraft = None        # what the inputs currently hold
    form_data: BookingDraft = None   # what completed steps committed
    payment_completed: bool = False
    pending: bool = False
    error: str = ''
    booking_id: str = ''

    def __post_init__(self):
        if self.form is None:
            object.__setattr__(self, 'form', BookingDraft(service_id=self.service_id))
        if self.form_data is None:
            object.__setattr__(self, 'form_data', BookingDraft(service_id=self.service_id))

    @classmethod
    def initial(cls, service_id: str) -> 'WizardState':
        return cls(service_id=service_id)

    @property
    def submitted(self) -> bool:
        return bool(self.booking_id)

    def to_dict(self) -> dict:
        return {
            'service_id': self.service_id,
            'token': self.token,
            'current_step': int(self.current_step),
            'form': self.form.to_dict(),
            'form_data': self.form_data.to_dict(),
            'payment_completed': self.payment_completed,
            'pending': self.pending,
            'error': self.error,
            'booking_id': self.booking_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WizardState':
        """Raises ValueError / KeyError / TypeError on a malformed dict."""
        step = int(data['current_step'])
        if step not in Step.values:
            raise ValueError(f'Unknown wizard step {step!r}')
        return cls(
            service_id=data['service_id'],
            token=data['token'],
            current_step=step,
            form=BookingDraft.from_dict(data.get('form')),
            form_data=BookingDraft.from_dict(data.get('form_data')),
            payment_completed=bool(data.get('payment_completed')),
            pending=bool(data.get('pending')),
            error=data.get('error') or '',
            booking_id=data.get('booking_id') or '',
        )


# ─────────────────────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UpdateDetails:
    """Personal fields and address. None means 'leave as is'."""
    name: str = None
    email: str = None
    phone: str = None
    location: str = None


@dataclass(frozen=True)
class SelectTest:
    value: str


@dataclass(frozen=True)
class InputSymptoms:
    text: str


@dataclass(frozen=True)
class ToggleOption:
    label: str


@dataclass(frozen=True)
class ChooseTreatmentLocation:
    location: str


@dataclass(frozen=True)
class ChooseTimeSlot:
    slot: str


@dataclass(frozen=True)
class ProceedToPayment:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class PaymentStarted:
    pass


@dataclass(frozen=True)
class PaymentSucceeded:
    token: str
    reference: str = ''


@dataclass(frozen=True)
class PaymentFailed:
    token: str
    message: str = PAYMENT_FAILED


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class SubmitSucceeded:
    token: str
    booking_id: str


@dataclass(frozen=True)
class SubmitFailed:
    token: str
    message: str


@dataclass(frozen=True)
class Reset:
    pass


# ─────────────────────────────────────────────────────────────────────────────
# Reducer
# ─────────────────────────────────────────────────────────────────────────────

_DETAIL_FIELDS = ('name', 'email', 'phone', 'location')
_STEP1_COPIED = (
    'name', 'email', 'phone', 'selected_test', 'symptoms',
    'location', 'treatment_location', 'checked_options',
)


def _edit_form(state, form):
    return replace(state, form=form, error='')


def _apply_field_event(state, event, service):
    form = state.form

    if isinstance(event, UpdateDetails):
        changes = {
            name: (getattr(event, name) or '').strip()
            for name in _DETAIL_FIELDS
            if getattr(event, name) is not None
        }
        return _edit_form(state, replace(form, **changes))

    if isinstance(event, SelectTest):
        return _edit_form(state, form.with_test(event.value))

    if isinstance(event, InputSymptoms):
        return _edit_form(state, form.with_symptoms(event.text))

    if isinstance(event, ToggleOption):
        section = section_for(service.type)
        if not isinstance(section, OptionsSection):
            return replace(state, error='This service has no options to choose from.')
        try:
            checked = section.toggle(form.checked_options, event.label)
        except BookingValidationError as exc:
            return replace(state, error=str(exc))
        return _edit_form(state, replace(form, checked_options=checked))

    if isinstance(event, ChooseTreatmentLocation):
        if event.location not in TreatmentLocation.values:
            return replace(state, error='Please choose clinic or home treatment.')
        return _edit_form(state, replace(form, treatment_location=event.location))

    raise TypeError(f'Not a field event: {event!r}')


def _proceed_to_payment(state, service):
    error = step1_error(service.type, state.form)
    if error:
        return replace(state, error=error)
    committed = replace(
        state.form_data,
        **{name: getattr(state.form, name) for name in _STEP1_COPIED},
    )
    return replace(state, current_step=Step.PAYMENT, form_data=committed, error='')


def _is_current(state, event, step) -> bool:
    """A result event only lands on the session, step and in-flight operation that produced it."""
    if event.token != state.token:
        logger.info('Dropping stale %s for wizard %s', type(event).__name__, state.service_id)
        return False
    return state.current_step == step and state.pending


def apply(state: WizardState, event, service) -> WizardState:
    """Return the state that results from `event`. Never raises for rule violations."""
    if isinstance(event, Reset):
        return WizardState.initial(state.service_id)

    if state.submitted:
        return state

    step = state.current_step

    if isinstance(event, (UpdateDetails, SelectTest, InputSymptoms, ToggleOption, ChooseTreatmentLocation)):
        if step != Step.DETAILS:
            return state
        return _apply_field_event(state, event, service)

    if isinstance(event, ProceedToPayment):
        if step != Step.DETAILS:
            return state
        return _proceed_to_payment(state, service)

    if isinstance(event, ChooseTimeSlot):
        if step != Step.PAYMENT or state.pending:
            return state
        return _edit_form(state, replace(state.form, time_slot=(event.slot or '').strip()))

    if isinstance(event, Back):
        if step != Step.PAYMENT:
            return state
        return replace(state, current_step=Step.DETAILS, pending=False, error='')

    if isinstance(event, PaymentStarted):
        if step != Step.PAYMENT or state.pending:
            return state
        if not service.has_slot(state.form.time_slot):
            return replace(state, error='Please select an appointment time.')
        return replace(state, pending=True, error='')

    if isinstance(event, PaymentSucceeded):
        if not _is_current(state, event, Step.PAYMENT):
            return state
        return replace(
            state,
            current_step=Step.CONFIRM,
            payment_completed=True,
            pending=False,
            error='',
            form_data=replace(state.form_data, time_slot=state.form.time_slot),
        )

    if isinstance(event, PaymentFailed):
        if not _is_current(state, event, Step.PAYMENT):
            return state
        return replace(state, pending=False, error=event.message or PAYMENT_FAILED)

    if isinstance(event, SubmitStarted):
        if step != Step.CONFIRM or state.pending:
            return state
        if not state.form_data.name or not state.form_data.email:
            return replace(state, error=MISSING_INFORMATION)
        result = validate_booking_data(state.form_data, service.type)
        if not result.is_valid:
            return replace(state, error='; '.join(result.errors))
        return replace(state, pending=True, error='')

    if isinstance(event, SubmitSucceeded):
        if not _is_current(state, event, Step.CONFIRM):
            return state
        return replace(state, pending=False, error='', booking_id=event.booking_id)

    if isinstance(event, SubmitFailed):
        if not _is_current(state, event, Step.CONFIRM):
            return state
        return replace(state, pending=False, error=event.message)

    raise TypeError(f'Unknown wizard event: {event!r}')


# ─────────────────────────────────────────────────────────────────────────────
# Driver
# ─────────────────────────────────────────────────────────────────────────────

def submission_error_message(exc: SubmissionError) -> str:
    """User-facing text for a failed submission. Retrying is left to the user."""
    if isinstance(exc, InvalidInputError):
        return 'We could not process your booking details. Please review them and try again.'
    if isinstance(exc, SubmissionTimeoutError):
        return 'The booking service took too long to respond. Please try again.'
    if isinstance(exc, NetworkError):
        return 'We could not reach the booking service. Please check your connection and try again.'
    return 'Failed to complete booking. Please try again.'


@dataclass(frozen=True)
class BookingOutcome:
    """What the caller needs after a successful submission, including where to send the browser."""
    booking_id: str
    whatsapp_url: str
    whatsapp_message: str


class BookingWizard:
    """
    Owns one wizard session: its state plus the payment processor and
    booking API client used by the asynchronous transitions.

    Collaborators are injected; the defaults are built lazily so the pure
    parts can be used without settings-dependent objects.
    """

    def __init__(self, service, state=None, payment_processor=None, booking_client=None):
        self.service = service
        self.state = state or WizardState.initial(service.id)
        self._payment_processor = payment_processor
        self._booking_client = booking_client

    @property
    def payment_processor(self):
        if self._payment_processor is None:
            from apps.payments.processor import SimulatedPaymentProcessor
            self._payment_processor = SimulatedPaymentProcessor()
        return self._payment_processor

    @property
    def booking_client(self):
        if self._booking_client is None:
            from .client import BookingApiClient
            self._booking_client = BookingApiClient()
        return self._booking_client

    def dispatch(self, event) -> WizardState:
        self.state = apply(self.state, event, self.service)
        return self.state

    def reset(self) -> WizardState:
        return self.dispatch(Reset())

    async def confirm_payment(self) -> WizardState:
        """
        Step 2 -> 3. Raises BookingValidationError when no valid slot is
        chosen and PaymentError when the payment fails; the state records
        the error either way and stays on step 2.
        """
        if self.state.pending:
            raise BookingInProgressError('A payment is already being processed.')

        self.dispatch(PaymentStarted())
        if not self.state.pending:
            raise BookingValidationError(self.state.error or 'Cannot start payment from this step.')

        token = self.state.token
        try:
            result = await self.payment_processor.charge(self.state.form, self.service)
        except asyncio.CancelledError:
            self.dispatch(PaymentFailed(token, PAYMENT_FAILED))
            raise
        except PaymentError as exc:
            self.dispatch(PaymentFailed(token, str(exc) or PAYMENT_FAILED))
            raise
        except Exception as exc:
            logger.exception('Payment failed for %s', self.service.id)
            self.dispatch(PaymentFailed(token, PAYMENT_FAILED))
            raise PaymentError(PAYMENT_FAILED) from exc

        return self.dispatch(PaymentSucceeded(token, result.reference))

    async def complete_booking(self) -> BookingOutcome:
        """
        Step 3 -> submitted. Posts the committed draft to the booking API and
        returns the booking id plus the WhatsApp deep link for the doctor.

        Raises BookingValidationError (nothing sent) or SubmissionError
        (state keeps the user-facing message, user may retry).
        """
        if self.state.pending:
            raise BookingInProgressError('This booking is already being submitted.')

        self.dispatch(SubmitStarted())
        if not self.state.pending:
            raise BookingValidationError(self.state.error or 'Cannot submit from this step.')

        token = self.state.token
        draft = self.state.form_data
        try:
            booking_id = await self.booking_client.submit(draft, self.service)
        except asyncio.CancelledError:
            self.dispatch(SubmitFailed(token, 'Booking was interrupted. Please try again.'))
            raise
        except SubmissionError as exc:
            logger.warning('Booking submission failed for %s: %s', self.service.id, exc)
            self.dispatch(SubmitFailed(token, submission_error_message(exc)))
            raise

        self.dispatch(SubmitSucceeded(token, booking_id))

        message = build_patient_message(self.service, draft)
        return BookingOutcome(
            booking_id=booking_id,
            whatsapp_url=build_whatsapp_url(self.service.doctor_whatsapp, message),
            whatsapp_message=message,
        )
