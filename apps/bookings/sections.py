"""
Service sections — the step-1 fields that depend on the service type.

The set is closed: every ServiceType maps to exactly one section in
SECTIONS, and each section only looks at the draft fields it owns.

  laboratory, dental        -> TestOrSymptomsSection  (selected_test XOR symptoms)
  consultation, prescription -> OptionsSection        (1-2 checked menu options)
  home                      -> HomeSection            (address)
  treatment                 -> TreatmentSection       (clinic | home + address)

Each section answers two questions:
  step1_problem(draft)   first unmet rule as a user-facing message, or None
  final_problems(draft)  all unmet rules, for the pre-submit check
"""
from apps.services.catalog import ServiceType

from .draft import TreatmentLocation
from .exceptions import BookingValidationError

MIN_SYMPTOMS_LENGTH = 5
MIN_LOCATION_LENGTH = 6
MAX_CHECKED_OPTIONS = 2

CONSULTATION_OPTIONS = (
    'General Consultation',
    'Talk to a Physician Today',
    'Learn About Your Health',
    'Medical Counseling',
)

PRESCRIPTION_OPTIONS = (
    'I Feel Unwell',
    'Order Supplements',
)


def _has_address(draft) -> bool:
    return len((draft.location or '').strip()) >= MIN_LOCATION_LENGTH


class ServiceSection:
    template_name = None

    def step1_problem(self, draft):
        raise NotImplementedError

    def final_problems(self, draft) -> list:
        problem = self.step1_problem(draft)
        return [problem] if problem else []


class TestOrSymptomsSection(ServiceSection):
    template_name = 'bookings/sections/test_or_symptoms.html'

    def step1_problem(self, draft):
        if draft.selected_test:
            return None
        if len((draft.symptoms or '').strip()) >= MIN_SYMPTOMS_LENGTH:
            return None
        return 'Please either select a test or describe your symptoms.'

    def final_problems(self, draft) -> list:
        if draft.selected_test or (draft.symptoms or '').strip():
            return []
        return ['Either select a test or describe your symptoms']


class OptionsSection(ServiceSection):
    template_name = 'bookings/sections/options.html'

    def __init__(self, heading, options):
        self.heading = heading
        self.options = tuple(options)

    def step1_problem(self, draft):
        checked = draft.checked_options
        if not checked:
            return 'Please select at least one option.'
        if len(checked) > MAX_CHECKED_OPTIONS:
            return f'You can select up to {MAX_CHECKED_OPTIONS} options.'
        if any(label not in self.options for label in checked):
            return 'Please choose from the listed options.'
        return None

    def final_problems(self, draft) -> list:
        if not draft.checked_options and (draft.symptoms or '').strip():
            # Over the wire the checked options travel as the symptoms text
            return []
        return super().final_problems(draft)

    def toggle(self, checked: tuple, label: str) -> tuple:
        """
        Check or uncheck one option.
        A third option is rejected, not silently dropped: raises
        BookingValidationError and the caller keeps its current set.
        """
        if label not in self.options:
            raise BookingValidationError('Please choose from the listed options.')
        if label in checked:
            return tuple(item for item in checked if item != label)
        if len(checked) >= MAX_CHECKED_OPTIONS:
            raise BookingValidationError(
                f'You can select up to {MAX_CHECKED_OPTIONS} options. '
                'Uncheck one to choose another.'
            )
        return tuple(checked) + (label,)


class HomeSection(ServiceSection):
    template_name = 'bookings/sections/home.html'

    def step1_problem(self, draft):
        if _has_address(draft):
            return None
        return 'Please enter your full home address.'


class TreatmentSection(ServiceSection):
    template_name = 'bookings/sections/treatment.html'

    def step1_problem(self, draft):
        if draft.treatment_location not in TreatmentLocation.values:
            return 'Please choose where you would like to receive treatment.'
        if draft.treatment_location == TreatmentLocation.HOME and not _has_address(draft):
            return 'Please enter your full home address for the home visit.'
        return None


SECTIONS = {
    ServiceType.LABORATORY:   TestOrSymptomsSection(),
    ServiceType.DENTAL:       TestOrSymptomsSection(),
    ServiceType.CONSULTATION: OptionsSection('What do you need help with?', CONSULTATION_OPTIONS),
    ServiceType.PRESCRIPTION: OptionsSection('You want prescription and recommendation?', PRESCRIPTION_OPTIONS),
    ServiceType.TREATMENT:    TreatmentSection(),
    ServiceType.HOME:         HomeSection(),
}

# Unknown types fall back to the laboratory rules
DEFAULT_SECTION = SECTIONS[ServiceType.LABORATORY]


def section_for(service_type) -> ServiceSection:
    return SECTIONS.get(service_type, DEFAULT_SECTION)
