"""
Booking wizard views — a 3-step form backed by the Django session.

  GET  /appointments/?service=<id>         render the current step
  POST /appointments/<id>/details/         step 1 -> 2
  POST /appointments/<id>/payment/         step 2 -> 3 (async, simulated payment)
  POST /appointments/<id>/back/            step 2 -> 1
  POST /appointments/<id>/confirm/         step 3 -> booking API -> WhatsApp (async)
  POST /appointments/<id>/reset/           any step -> 1

Every POST turns form input into wizard events, saves the resulting state
and redirects back to the wizard page. Rule violations are shown inline
from `state.error`; nothing is raised to the user.
"""
import logging

from django.conf import settings
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from apps.payments.processor import amount_due, format_naira
from apps.services.catalog import ServiceType, get_service

from .client import BookingApiClient
from .exceptions import BookingError
from .forms import DetailsForm, TimeSlotForm
from .sections import section_for
from .session import clear_wizard_state, load_wizard_state, save_wizard_state
from .wizard import (
    Back,
    BookingWizard,
    ChooseTimeSlot,
    ChooseTreatmentLocation,
    InputSymptoms,
    ProceedToPayment,
    Reset,
    SelectTest,
    Step,
    ToggleOption,
    UpdateDetails,
)

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

_TEST_TYPES = (ServiceType.LABORATORY, ServiceType.DENTAL)


def _get_service_or_404(service_id):
    service = get_service(service_id)
    if service is None:
        raise Http404('Unknown service')
    return service


def _wizard_url(service) -> str:
    return f"{reverse('bookings:appointment')}?service={service.id}"


def _booking_client(request) -> BookingApiClient:
    if settings.BOOKING_API_URL:
        return BookingApiClient(url=settings.BOOKING_API_URL)
    # Our own /api/bookings, served in-process
    return BookingApiClient(url=request.build_absolute_uri(reverse('api_bookings')), in_process=True)


def _build_wizard(request, service) -> BookingWizard:
    return BookingWizard(
        service,
        state=load_wizard_state(request, service),
        booking_client=_booking_client(request),
    )


def _step1_events(service, state, data):
    """Translate cleaned step-1 form data into wizard events, in order."""
    events = [UpdateDetails(
        name=data.get('name', ''),
        email=data.get('email', ''),
        phone=data.get('phone', ''),
        location=data.get('location', ''),
    )]

    if service.type in _TEST_TYPES:
        # A chosen test wins over typed symptoms
        if data.get('selected_test'):
            events.append(SelectTest(data['selected_test']))
        else:
            events.append(InputSymptoms(data.get('symptoms', '')))

    if service.type in (ServiceType.CONSULTATION, ServiceType.PRESCRIPTION):
        wanted = data.get('options') or []
        current = state.form.checked_options
        events += [ToggleOption(label) for label in current if label not in wanted]
        events += [ToggleOption(label) for label in wanted if label not in current]

    if service.type == ServiceType.TREATMENT and data.get('treatment_location'):
        events.append(ChooseTreatmentLocation(data['treatment_location']))

    return events


# ─────────────────────────────────────────────────────────────────────────────
# Wizard page
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
def appointment(request):
    service = _get_service_or_404(request.GET.get('service'))
    state = load_wizard_state(request, service)

    return render(request, 'bookings/wizard.html', {
        'service': service,
        'state': state,
        'steps': Step.choices,
        'section_template': section_for(service.type).template_name,
        'section': section_for(service.type),
        'details_form': DetailsForm.from_draft(service, state.form),
        'slot_form': TimeSlotForm(service, initial={'time_slot': state.form.time_slot}),
        'amount_due': format_naira(amount_due(service, state.form_data)),
        'selected_test_label': service.test_label(state.form_data.selected_test),
    })


# ─────────────────────────────────────────────────────────────────────────────
# Step 1: Details
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
def submit_details(request, service_id):
    service = _get_service_or_404(service_id)
    wizard = BookingWizard(service, state=load_wizard_state(request, service))

    form = DetailsForm(service, request.POST)
    form.is_valid()
    data = form.cleaned_data

    for event in _step1_events(service, wizard.state, data):
        wizard.dispatch(event)
        # Details edits clear the last error, so only this request's events stop here
        if wizard.state.error:
            break
    else:
        wizard.dispatch(ProceedToPayment())

    save_wizard_state(request, wizard.state)
    return redirect(_wizard_url(service))


# ─────────────────────────────────────────────────────────────────────────────
# Step 2: Payment
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
async def confirm_payment(request, service_id):
    service = _get_service_or_404(service_id)
    wizard = _build_wizard(request, service)

    form = TimeSlotForm(service, request.POST)
    form.is_valid()
    wizard.dispatch(ChooseTimeSlot(form.cleaned_data.get('time_slot', '')))

    try:
        await wizard.confirm_payment()
    except BookingError as exc:
        logger.info('Payment step not completed for %s: %s', service.id, exc)

    save_wizard_state(request, wizard.state)
    return redirect(_wizard_url(service))


@require_POST
def go_back(request, service_id):
    service = _get_service_or_404(service_id)
    wizard = BookingWizard(service, state=load_wizard_state(request, service))
    wizard.dispatch(Back())
    save_wizard_state(request, wizard.state)
    return redirect(_wizard_url(service))


# ─────────────────────────────────────────────────────────────────────────────
# Step 3: Confirmation
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
async def complete_booking(request, service_id):
    service = _get_service_or_404(service_id)
    wizard = _build_wizard(request, service)

    try:
        outcome = await wizard.complete_booking()
    except BookingError as exc:
        logger.info('Booking not completed for %s: %s', service.id, exc)
        save_wizard_state(request, wizard.state)
        return redirect(_wizard_url(service))

    # Start fresh for the next booking, then hand the patient over to WhatsApp
    clear_wizard_state(request, service.id)
    logger.info('Booking %s complete, redirecting to WhatsApp', outcome.booking_id)
    return redirect(outcome.whatsapp_url)


@require_POST
def reset_booking(request, service_id):
    service = _get_service_or_404(service_id)
    wizard = BookingWizard(service, state=load_wizard_state(request, service))
    wizard.dispatch(Reset())
    save_wizard_state(request, wizard.state)
    return redirect(_wizard_url(service))
