"""
Field validation for bookings. Pure functions, no side effects.

Public API:
  is_step1_valid(service_type, draft)        -> bool
  step1_error(service_type, draft)           -> message or None
  validate_booking_data(draft, service_type) -> ValidationResult

validate_booking_data is used twice: by the wizard just before submission,
and by POST /api/bookings, since the browser-side checks are not a
guarantee of anything.
"""
import re
from dataclasses import dataclass, field

from .draft import TreatmentLocation
from .sections import MIN_LOCATION_LENGTH, section_for

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 10


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list = field(default_factory=list)


def _filled(value) -> bool:
    return bool((value or '').strip())


def step1_error(service_type, draft):
    """First unmet step-1 rule as a user-facing message, or None when the step is complete."""
    if not (_filled(draft.name) and _filled(draft.email) and _filled(draft.phone)):
        return 'Please fill in all required fields.'
    return section_for(service_type).step1_problem(draft)


def is_step1_valid(service_type, draft) -> bool:
    return step1_error(service_type, draft) is None


def validate_booking_data(draft, service_type=None) -> ValidationResult:
    """
    Full check of a draft before submission.

    Without a service type the generic rules apply: a test or symptoms are
    always required, and an address is required for a home treatment. With
    a service type, those two rules are replaced by that type's section.
    """
    errors = []

    if len((draft.name or '').strip()) < MIN_NAME_LENGTH:
        errors.append('Name must be at least 2 characters')

    if not draft.email or not EMAIL_RE.match(draft.email):
        errors.append('Invalid email address')

    if len((draft.phone or '').strip()) < MIN_PHONE_LENGTH:
        errors.append('Phone must be at least 10 characters')

    if not _filled(draft.time_slot):
        errors.append('Time slot must be selected')

    if service_type is None:
        if not draft.selected_test and not draft.symptoms:
            errors.append('Either select a test or describe your symptoms')
        if (draft.treatment_location == TreatmentLocation.HOME
                and len((draft.location or '').strip()) < MIN_LOCATION_LENGTH):
            errors.append('Home address is required for a home visit')
    else:
        errors.extend(section_for(service_type).final_problems(draft))

    return ValidationResult(is_valid=not errors, errors=errors)
