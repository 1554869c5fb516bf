"""
management command: preview_notifications

Prints the confirmation email, the doctor's WhatsApp notification and the
patient's wa.me link that a sample booking for one service would produce.
Nothing is sent.

  python manage.py preview_notifications --service treatment
  python manage.py preview_notifications --service laboratory --html
"""
from dataclasses import replace

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.bookings.draft import BookingDraft, TreatmentLocation
from apps.bookings.gateway import BookingConfirmation, generate_booking_id
from apps.notifications.emails import compose_booking_confirmation
from apps.notifications.whatsapp import build_doctor_message, build_patient_message, build_whatsapp_url
from apps.services.catalog import ServiceType, all_services, get_service

SAMPLE_ADDRESS = 'No. 5 Ekeki Road, Yenagoa'


def _sample_draft(service) -> BookingDraft:
    draft = BookingDraft(
        service_id=service.id,
        name='Ada Okoro',
        email='ada@example.com',
        phone='08012345678',
        time_slot=service.available_slots[0] if service.available_slots else '',
    )
    if service.test_options:
        return draft.with_test(service.test_options[0].value)
    if service.type == ServiceType.HOME:
        return replace(draft, location=SAMPLE_ADDRESS)
    if service.type == ServiceType.TREATMENT:
        return replace(draft, treatment_location=TreatmentLocation.HOME, location=SAMPLE_ADDRESS)
    return draft.with_symptoms('Headache and mild fever for two days')


class Command(BaseCommand):
    help = 'Print the notifications a sample booking would produce'

    def add_arguments(self, parser):
        parser.add_argument(
            '--service',
            default='laboratory',
            help='Service id: ' + ', '.join(s.id for s in all_services()),
        )
        parser.add_argument('--html', action='store_true', help='Also print the HTML email body')

    def handle(self, *args, **options):
        service = get_service(options['service'])
        if service is None:
            raise CommandError(f"Unknown service '{options['service']}'")

        draft = _sample_draft(service)
        booking = BookingConfirmation(
            booking_id=generate_booking_id(),
            customer_name=draft.name,
            customer_email=draft.email,
            customer_phone=draft.phone,
            service_id=service.id,
            service_name=service.name,
            time_slot=draft.time_slot,
            doctor_name=service.doctor_name,
            doctor_email=service.doctor_email,
            doctor_whatsapp=service.doctor_whatsapp,
            created_at=timezone.now().isoformat(),
            selected_test=service.test_label(draft.selected_test) if draft.selected_test else '',
            symptoms=draft.symptoms,
            location=draft.location,
            treatment_location=draft.treatment_location,
        )

        email = compose_booking_confirmation(booking)
        self.stdout.write(self.style.MIGRATE_HEADING(f'Email to {email.to}'))
        self.stdout.write(f'Subject: {email.subject}\n')
        self.stdout.write(email.text_body)
        if options['html']:
            self.stdout.write(email.html_body)

        self.stdout.write(self.style.MIGRATE_HEADING(f'WhatsApp to doctor (+{service.doctor_whatsapp})'))
        self.stdout.write(build_doctor_message(booking))

        patient_message = build_patient_message(service, draft)
        self.stdout.write(self.style.MIGRATE_HEADING('Patient redirect'))
        self.stdout.write(build_whatsapp_url(service.doctor_whatsapp, patient_message))

        self.stdout.write(self.style.SUCCESS(f'preview_notifications: {service.id} ({booking.booking_id})'))
