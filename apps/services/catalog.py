"""
Service catalog — the bookable healthcare offerings.

Pure data, built once at import time. Each service carries its own doctor
contact target, ordered appointment slots and, for laboratory and dental
care, a menu of test options.

Design decision: the catalog is code, not database rows. There is no
persistence layer, and the booking wizard only ever needs a read-only lookup
by service id.

Public API:
  get_service(service_id)      -> Service or None
  all_services()               -> list of Service, in display order
"""
from dataclasses import dataclass
from decimal import Decimal

from django.db import models

DOCTOR_WHATSAPP = '2349076167977'


class ServiceType(models.TextChoices):
    LABORATORY   = 'laboratory',   'Laboratory'
    DENTAL       = 'dental',       'Dental'
    CONSULTATION = 'consultation', 'Consultation'
    PRESCRIPTION = 'prescription', 'Prescription'
    TREATMENT    = 'treatment',    'Treatment'
    HOME         = 'home',         'Home Service'


@dataclass(frozen=True)
class TestOption:
    id: str
    label: str
    value: str
    description: str = ''


@dataclass(frozen=True)
class Service:
    id: str
    type: str
    name: str
    description: str
    doctor_name: str
    doctor_email: str
    doctor_whatsapp: str
    available_slots: tuple
    test_options: tuple = ()
    consultation_fee: Decimal = None
    deposit_amount: Decimal = None

    def __str__(self):
        return self.name

    def has_slot(self, slot: str) -> bool:
        return bool(slot) and slot in self.available_slots

    def test_label(self, value: str) -> str:
        """Human label for a test option value; falls back to the raw value."""
        for option in self.test_options:
            if option.value == value:
                return option.label
        return value


LABORATORY_TEST_OPTIONS = (
    TestOption('blood-test', 'Complete Blood Count (CBC)', 'blood-test', 'Comprehensive blood analysis'),
    TestOption('lipid-panel', 'Lipid Panel', 'lipid-panel', 'Cholesterol and fat levels'),
    TestOption('thyroid', 'Thyroid Function Test', 'thyroid', 'TSH and thyroid hormone levels'),
    TestOption('diabetes', 'Diabetes Screening', 'diabetes', 'Blood glucose and HbA1c tests'),
    TestOption('liver', 'Liver Function Test', 'liver', 'Liver enzyme and bilirubin levels'),
    TestOption('kidney', 'Kidney Function Test', 'kidney', 'Creatinine and kidney health markers'),
)

DENTAL_TEST_OPTIONS = (
    TestOption('cleaning', 'Professional Cleaning', 'cleaning', 'Deep teeth and gum cleaning'),
    TestOption('checkup', 'Dental Checkup', 'checkup', 'Full mouth examination and X-rays'),
    TestOption('extraction', 'Tooth Extraction', 'extraction', 'Safe extraction procedure'),
    TestOption('filling', 'Tooth Filling', 'filling', 'Cavity treatment and restoration'),
    TestOption('root-canal', 'Root Canal Treatment', 'root-canal', 'Advanced endodontic treatment'),
)

HOME_DEPOSIT = Decimal('10500')

_SERVICES = (
    Service(
        id='laboratory',
        type=ServiceType.LABORATORY,
        name='Medical Laboratory Services',
        description='Advanced laboratory testing and diagnostic services',
        doctor_name='Dr. Lab Specialist',
        doctor_email='lab@buburuebihealthcare.com',
        doctor_whatsapp=DOCTOR_WHATSAPP,
        available_slots=(
            '09:00 AM', '10:00 AM', '11:00 AM', '12:00 PM',
            '02:00 PM', '03:00 PM', '04:00 PM', '05:00 PM',
        ),
        test_options=LABORATORY_TEST_OPTIONS,
    ),
    Service(
        id='dental',
        type=ServiceType.DENTAL,
        name='Dental Services',
        description='Professional dental care for a healthy smile',
        doctor_name='Dr. Dental Expert',
        doctor_email='dental@buburuebihealthcare.com',
        doctor_whatsapp=DOCTOR_WHATSAPP,
        available_slots=(
            '08:00 AM', '09:00 AM', '10:00 AM', '11:00 AM',
            '01:00 PM', '02:00 PM', '03:00 PM', '04:00 PM',
        ),
        test_options=DENTAL_TEST_OPTIONS,
    ),
    Service(
        id='consultation',
        type=ServiceType.CONSULTATION,
        name='Consultations & Counselling',
        description='Expert medical advice and mental health support',
        doctor_name='Dr. Consultation Specialist',
        doctor_email='consultation@buburuebihealthcare.com',
        doctor_whatsapp=DOCTOR_WHATSAPP,
        available_slots=(
            '10:00 AM', '11:00 AM', '02:00 PM', '03:00 PM',
            '04:00 PM', '05:00 PM', '06:00 PM', '07:00 PM',
        ),
    ),
    Service(
        id='prescription',
        type=ServiceType.PRESCRIPTION,
        name='Prescription & Recommendation',
        description='Prescriptions, supplements and treatment recommendations',
        doctor_name='Dr. Prescription Specialist',
        doctor_email='prescription@buburuebihealthcare.com',
        doctor_whatsapp=DOCTOR_WHATSAPP,
        available_slots=(
            '09:00 AM', '10:00 AM', '11:00 AM', '12:00 PM',
            '02:00 PM', '03:00 PM', '04:00 PM', '05:00 PM',
        ),
    ),
    Service(
        id='treatment',
        type=ServiceType.TREATMENT,
        name='Treatment & Patient Management',
        description='Ongoing treatment at our clinic or in the comfort of your home',
        doctor_name='Dr. Treatment Specialist',
        doctor_email='treatment@buburuebihealthcare.com',
        doctor_whatsapp=DOCTOR_WHATSAPP,
        available_slots=(
            '08:00 AM', '09:00 AM', '10:00 AM', '11:00 AM',
            '12:00 PM', '02:00 PM', '03:00 PM', '04:00 PM',
        ),
        consultation_fee=Decimal('15000'),
        deposit_amount=HOME_DEPOSIT,
    ),
    Service(
        id='home',
        type=ServiceType.HOME,
        name='Home Service',
        description='Qualified healthcare professionals at your doorstep (Bayelsa State only)',
        doctor_name='Dr. Home Care Specialist',
        doctor_email='home@buburuebihealthcare.com',
        doctor_whatsapp=DOCTOR_WHATSAPP,
        available_slots=(
            '08:00 AM', '10:00 AM', '12:00 PM', '02:00 PM', '04:00 PM',
        ),
        deposit_amount=HOME_DEPOSIT,
    ),
)

SERVICES = {service.id: service for service in _SERVICES}


def get_service(service_id):
    """Case-insensitive lookup; None for an unknown or empty id."""
    if not service_id:
        return None
    return SERVICES.get(str(service_id).strip().lower())


def all_services() -> list:
    return list(_SERVICES)
