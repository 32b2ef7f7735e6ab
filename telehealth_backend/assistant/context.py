"""Role-specific context blocks appended to the system prompt."""

from django.utils import timezone

from telehealth_backend.assistant.prompts import NO_PATIENT_DATA
from telehealth_backend.consultations.models import Consultation
from telehealth_backend.intake.services import latest_for_email
from telehealth_backend.patients.models import Patient
from telehealth_backend.prescriptions.models import Prescription
from telehealth_backend.providers.services import provider_for_user


def _join(values):
    if isinstance(values, (list, tuple)):
        return ', '.join(str(v) for v in values if v)
    return str(values) if values else ''


def patient_context(patient, intake) -> str:
    parts = []
    if patient is not None:
        if patient.medical_conditions:
            parts.append(f'Medical conditions: {_join(patient.medical_conditions)}')
        if patient.current_medications:
            parts.append(f'Current medications: {_join(patient.current_medications)}')
        if patient.allergies:
            parts.append(f'Allergies: {_join(patient.allergies)}')
        if patient.gender:
            parts.append(f'Gender: {patient.gender}')
        if patient.date_of_birth:
            parts.append(f'DOB: {patient.date_of_birth.isoformat()}')

    if intake is not None:
        if intake.chief_complaint:
            parts.append(f'Chief complaint: {intake.chief_complaint}')
        if intake.symptom_duration:
            parts.append(f'Symptom duration: {intake.symptom_duration}')
        if intake.severity_level:
            parts.append(f'Severity: {intake.severity_level}/10')
        symptoms = intake.current_symptoms if isinstance(intake.current_symptoms, dict) else {}
        if symptoms.get('related_symptoms'):
            parts.append(f"Related symptoms: {_join(symptoms['related_symptoms'])}")
        if symptoms.get('previous_treatments'):
            parts.append(f"Previous treatments: {symptoms['previous_treatments']}")
        history = intake.medical_history if isinstance(intake.medical_history, dict) else {}
        if history.get('surgeries'):
            parts.append(f"Previous surgeries: {_join(history['surgeries'])}")
        if history.get('family_history'):
            parts.append(f"Family history: {_join(history['family_history'])}")

    return '\n'.join(parts) if parts else NO_PATIENT_DATA


def provider_context(user) -> str:
    provider = provider_for_user(user)
    if provider is None:
        return 'No provider profile on file.'

    today = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
    mine = Consultation.objects.filter(provider=provider)
    waiting = Consultation.objects.filter(status=Consultation.STATUS_WAITING).count()
    lines = [
        f'Waiting room: {waiting} patients',
        f'Your consultations in progress: {mine.filter(status=Consultation.STATUS_IN_PROGRESS).count()}',
        f'Completed today: {mine.filter(status=Consultation.STATUS_COMPLETED, ended_at__gte=today).count()}',
        f'Prescriptions awaiting signature: {provider.prescriptions.filter(status__in=[Prescription.STATUS_DRAFT, Prescription.STATUS_PENDING_REVIEW]).count()}',
    ]
    return '\n'.join(lines)


def admin_context() -> str:
    active = [
        Prescription.STATUS_SIGNED,
        Prescription.STATUS_SENT,
        Prescription.STATUS_FILLING,
        Prescription.STATUS_READY,
    ]
    lines = [
        f'Patients on file: {Patient.objects.count()}',
        f'Prescriptions: {Prescription.objects.filter(status=Prescription.STATUS_PENDING_REVIEW).count()} pending review, '
        f'{Prescription.objects.filter(status__in=active).count()} active',
        f'Total prescriptions: {Prescription.objects.count()}',
        f'Waiting room: {Consultation.objects.filter(status=Consultation.STATUS_WAITING).count()} patients',
    ]
    return '\n'.join(lines)


def build_context(user, role_name, intake=None) -> str:
    if role_name == 'admin':
        return admin_context()
    if role_name in ('provider', 'nurse'):
        return provider_context(user)

    patient = Patient.objects.filter(user=user).first()
    if intake is None:
        intake = latest_for_email(user.email)
    return patient_context(patient, intake)
