"""
Static marketing copy for the home and about pages.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Slide:
    text: str
    subtext: str
    cta: str
    service_id: str = ''


@dataclass(frozen=True)
class Testimonial:
    rating: int
    testimony: str
    user_name: str

    @property
    def stars(self):
        return range(self.rating)


@dataclass(frozen=True)
class Value:
    title: str
    description: str


CTA_SLIDES = (
    Slide(
        text='You want a Consultation?',
        subtext='Connect with experienced healthcare professionals at your convenience',
        cta='Book an Appointment Now!',
        service_id='consultation',
    ),
    Slide(
        text='Do you feel unwell?',
        subtext='Get immediate medical guidance anytime, day or night',
        cta='Contact our 24/7 Support!',
    ),
    Slide(
        text='Do you want to talk to a physician today?',
        subtext='Skip the waiting room and get expert medical advice instantly',
        cta='Talk to a Physician Now!',
        service_id='consultation',
    ),
    Slide(
        text='Do you want to know your health status?',
        subtext='Comprehensive diagnostics to monitor and maintain your wellbeing',
        cta='Schedule a Full Body Checkup!',
        service_id='laboratory',
    ),
    Slide(
        text='Organisations partner with us for employee health plans and for improved healthcare delivery',
        subtext='Message us at info@buburuebihealthcare.com',
        cta='Get in Touch with us!',
    ),
)

TESTIMONIALS = (
    Testimonial(5, 'The healthcare service provided has been exceptional. The doctors are knowledgeable '
                   'and the support team is incredibly responsive. Highly recommended!', 'Sarah Johnson'),
    Testimonial(5, 'Outstanding experience from start to finish. The appointment booking was seamless and '
                   'the consultation was thorough. Best healthcare platform I\'ve used!', 'Michael Chen'),
    Testimonial(4, 'Very impressed with the 24/7 support team. They responded to my concerns promptly and '
                   'provided clear guidance. Great service overall.', 'Emily Rodriguez'),
    Testimonial(5, 'This platform has revolutionized how I manage my health. Easy to use, reliable doctors, '
                   'and affordable prices. Couldn\'t ask for better!', 'David Patel'),
    Testimonial(5, 'Fantastic experience with the full body checkup service. The results were detailed and '
                   'the follow-up consultations were incredibly helpful. Highly satisfied!', 'Jessica Williams'),
)

VALUES = (
    Value('Patient-Centric Care',
          'Your health and comfort are at the center of everything we do. We listen, we care, and we act.'),
    Value('Excellence & Expertise',
          'Our team consists of highly qualified and experienced healthcare professionals dedicated to your wellness.'),
    Value('Affordability & Accessibility',
          'Quality healthcare should be accessible to everyone. We keep our services affordable without '
          'compromising quality.'),
    Value('Innovation & Technology',
          'We use modern technology to provide efficient, accurate and timely healthcare solutions.'),
    Value('Trust & Integrity',
          'Your trust is our most valuable asset. We operate with transparency and professional integrity.'),
    Value('Holistic Wellness',
          'We treat the whole person, not just symptoms, with care that covers physical, mental and emotional health.'),
)
