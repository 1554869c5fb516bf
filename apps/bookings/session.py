"""
Session helper for the booking wizard.

Wizard state is stored in request.session['booking'], one entry per
service, so booking a lab test and a dental checkup in two tabs does not
mix the two:

{
    "<service_id>": {
        "service_id":   "laboratory",
        "token":        "<uuid hex>",
        "current_step": 1 | 2 | 3,
        "form":         {...BookingDraft...},
        "form_data":    {...BookingDraft...},
        "payment_completed": false,
        "pending":      false,
        "error":        "",
        "booking_id":   "",
    },
}

Use the helpers below instead of accessing session['booking'] directly.
"""
import logging
from dataclasses import replace

from .wizard import WizardState

logger = logging.getLogger(__name__)

SESSION_KEY = 'booking'


def _all_wizards(request) -> dict:
    return request.session.get(SESSION_KEY, {})


def load_wizard_state(request, service) -> WizardState:
    """Stored state for `service`, or a fresh one when missing or unreadable."""
    data = _all_wizards(request).get(service.id)
    if not data:
        return WizardState.initial(service.id)
    try:
        state = WizardState.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning('Discarding unreadable wizard state for %s: %s', service.id, exc)
        return WizardState.initial(service.id)
    if state.service_id != service.id:
        return WizardState.initial(service.id)
    if state.pending:
        # In-flight operations never outlive the request that started them
        state = replace(state, pending=False)
    return state


def save_wizard_state(request, state: WizardState) -> None:
    wizards = _all_wizards(request)
    wizards[state.service_id] = state.to_dict()
    request.session[SESSION_KEY] = wizards
    request.session.modified = True


def clear_wizard_state(request, service_id: str) -> None:
    wizards = _all_wizards(request)
    if wizards.pop(service_id, None) is not None:
        request.session[SESSION_KEY] = wizards
        request.session.modified = True
