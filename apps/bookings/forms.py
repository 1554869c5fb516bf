from django import forms

from .draft import TreatmentLocation
from .sections import OptionsSection, section_for


class DetailsForm(forms.Form):
    """
    Step 1 inputs. Every field is optional here: completeness rules live in
    validation.py and are applied by the wizard, so the form only cleans.
    """
    name = forms.CharField(
        required=False,
        max_length=120,
        label='Full Name',
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Enter your full name',
            'autocomplete': 'name',
        }),
    )
    email = forms.CharField(
        required=False,
        max_length=254,
        label='Email Address',
        widget=forms.EmailInput(attrs={
            'class': 'form-control',
            'placeholder': 'Enter your email',
            'autocomplete': 'email',
        }),
    )
    phone = forms.CharField(
        required=False,
        max_length=20,
        label='Phone Number',
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Enter your phone number',
            'autocomplete': 'tel',
            'inputmode': 'tel',
        }),
    )
    selected_test = forms.ChoiceField(required=False, label='Select Test Type')
    symptoms = forms.CharField(
        required=False,
        max_length=1000,
        label='Describe your symptoms',
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 4,
            'placeholder': 'Describe your symptoms... How do you feel?',
        }),
    )
    options = forms.MultipleChoiceField(
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )
    treatment_location = forms.ChoiceField(
        required=False,
        choices=TreatmentLocation.choices,
        widget=forms.RadioSelect,
        label='Where would you like to receive treatment?',
    )
    location = forms.CharField(
        required=False,
        max_length=300,
        label='Home Address',
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 2,
            'placeholder': 'e.g. No. 5 Ekeki Road, Yenagoa, Bayelsa State...',
        }),
    )

    def __init__(self, service, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service
        self.fields['selected_test'].choices = [('', '-- Choose a test --')] + [
            (option.value, f'{option.label} — {option.description}')
            for option in service.test_options
        ]
        section = section_for(service.type)
        if isinstance(section, OptionsSection):
            self.fields['options'].choices = [(label, label) for label in section.options]
            self.fields['options'].label = f'{section.heading} (Select up to 2)'

    @classmethod
    def from_draft(cls, service, draft):
        return cls(service, initial={
            'name': draft.name,
            'email': draft.email,
            'phone': draft.phone,
            'selected_test': draft.selected_test,
            'symptoms': draft.symptoms,
            'options': list(draft.checked_options),
            'treatment_location': draft.treatment_location,
            'location': draft.location,
        })

    def clean_options(self):
        # Keep the order the boxes were ticked in; the wizard enforces the limit
        return list(dict.fromkeys(self.cleaned_data.get('options') or []))


class TimeSlotForm(forms.Form):
    time_slot = forms.ChoiceField(
        required=False,
        label='Select Appointment Time',
        widget=forms.Select(attrs={'class': 'form-control'}),
    )

    def __init__(self, service, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['time_slot'].choices = [('', 'Choose a time slot')] + [
            (slot, slot) for slot in service.available_slots
        ]
