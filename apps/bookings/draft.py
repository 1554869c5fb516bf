"""
BookingDraft — the in-progress, not-yet-submitted booking form data.

One draft backs the wizard's working form (what the inputs currently hold)
and a second one records what completed steps committed. Drafts are
immutable; use `dataclasses.replace` or the mutators below.

Wire format (POST /api/bookings) uses the camelCase keys listed in
API_FIELDS; `to_payload` / `from_payload` convert between the two.
"""
from dataclasses import asdict, dataclass, field, replace

from django.db import models


class TreatmentLocation(models.TextChoices):
    CLINIC = 'clinic', 'At the Clinic'
    HOME   = 'home',   'Home Service'


# draft attribute -> JSON key
API_FIELDS = {
    'name': 'name',
    'email': 'email',
    'phone': 'phone',
    'selected_test': 'selectedTest',
    'symptoms': 'symptoms',
    'time_slot': 'timeSlot',
    'service_id': 'serviceId',
    'location': 'location',
    'treatment_location': 'treatmentLocation',
}

REQUIRED_FIELDS = ('name', 'email', 'phone', 'time_slot', 'service_id')


@dataclass(frozen=True)
class BookingDraft:
    service_id: str = ''
    name: str = ''
    email: str = ''
    phone: str = ''
    selected_test: str = ''
    symptoms: str = ''
    location: str = ''
    treatment_location: str = ''
    time_slot: str = ''
    checked_options: tuple = field(default_factory=tuple)

    # ── Mutually exclusive test / symptoms ────────────────────────────────────

    def with_test(self, value: str) -> 'BookingDraft':
        """Selecting a test always clears symptoms."""
        return replace(self, selected_test=value or '', symptoms='')

    def with_symptoms(self, text: str) -> 'BookingDraft':
        """Typing symptoms always clears the selected test."""
        return replace(self, symptoms=text or '', selected_test='')

    # ── Derived ───────────────────────────────────────────────────────────────

    @property
    def requires_home_visit(self) -> bool:
        return self.treatment_location == TreatmentLocation.HOME

    def missing_required(self) -> list:
        return [name for name in REQUIRED_FIELDS if not str(getattr(self, name) or '').strip()]

    # ── Serialisation ─────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        data = asdict(self)
        data['checked_options'] = list(self.checked_options)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'BookingDraft':
        data = dict(data or {})
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        known['checked_options'] = tuple(known.get('checked_options') or ())
        for name, value in known.items():
            if name != 'checked_options' and value is None:
                known[name] = ''
        return cls(**known)

    def to_payload(self, service=None) -> dict:
        """JSON body for POST /api/bookings. Empty optional fields are omitted."""
        payload = {}
        for attr, key in API_FIELDS.items():
            value = getattr(self, attr)
            if value or attr in REQUIRED_FIELDS:
                payload[key] = value
        if self.checked_options and not self.symptoms:
            payload['symptoms'] = ', '.join(self.checked_options)
        if service is not None:
            payload.update({
                'doctorName': service.doctor_name,
                'doctorEmail': service.doctor_email,
                'doctorWhatsApp': service.doctor_whatsapp,
                'serviceName': service.name,
            })
        return payload

    @classmethod
    def from_payload(cls, payload: dict) -> 'BookingDraft':
        values = {}
        for attr, key in API_FIELDS.items():
            value = payload.get(key)
            values[attr] = value.strip() if isinstance(value, str) else ''
        return cls(**values)
