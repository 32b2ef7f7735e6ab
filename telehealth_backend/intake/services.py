"""
Intake lifecycle.

Step names map onto model fields through STEP_FIELDS. A step that is not in
the map is still recorded in ``completed_steps`` so clients can track their
own extra screens.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.utils import timezone

from telehealth_backend.core.exceptions import InvalidTransition, ValidationFailed
from telehealth_backend.intake.models import Intake

logger = logging.getLogger(__name__)

STEP_FIELDS = {
    'medical_history': 'medical_history',
    'symptoms': 'current_symptoms',
    'medications': 'medications',
    'allergies': 'allergies',
    'chief_complaint': 'chief_complaint',
    'symptom_duration': 'symptom_duration',
    'severity': 'severity_level',
    'vitals': 'vital_signs',
    'id_verification': 'id_verified',
    'consent': 'consent_given',
}

_BOOLEAN_FIELDS = {'id_verified', 'consent_given'}
_TEXT_FIELDS = {'chief_complaint', 'symptom_duration'}


def create_intake(*, email: str, patient=None, chief_complaint: str = '') -> Intake:
    return Intake.objects.create(
        email=(email or '').strip().lower(),
        patient=patient,
        status=Intake.STATUS_DRAFT,
        chief_complaint=chief_complaint or '',
        completed_steps=[],
        id_verified=False,
        consent_given=False,
    )


def _coerce(field: str, data):
    if field in _BOOLEAN_FIELDS:
        if isinstance(data, dict):
            data = data.get('value', data.get(field))
        return bool(data)
    if field in _TEXT_FIELDS:
        return '' if data is None else str(data)
    if field == 'severity_level':
        try:
            level = int(data)
        except (TypeError, ValueError):
            raise ValidationFailed('Severity must be a number from 1 to 10.', field='data')
        if not 1 <= level <= 10:
            raise ValidationFailed('Severity must be a number from 1 to 10.', field='data')
        return level
    return data


def record_step(intake: Intake, step: str, data) -> Intake:
    """Write one step's data and mark it completed (once)."""
    if intake.status not in Intake.OPEN_STATUSES:
        raise InvalidTransition(model='Intake', current=intake.status, requested=Intake.STATUS_IN_PROGRESS)

    update_fields = ['status', 'completed_steps', 'updated_at']
    field = STEP_FIELDS.get(step)
    if field:
        setattr(intake, field, _coerce(field, data))
        update_fields.append(field)

    steps = list(intake.completed_steps or [])
    if step not in steps:
        steps.append(step)
    intake.completed_steps = steps
    intake.status = Intake.STATUS_IN_PROGRESS
    intake.save(update_fields=update_fields)
    return intake


def complete_intake(intake: Intake) -> Intake:
    if intake.status not in Intake.OPEN_STATUSES:
        raise InvalidTransition(model='Intake', current=intake.status, requested=Intake.STATUS_COMPLETED)
    if not intake.consent_given:
        raise ValidationFailed('Patient consent is required to complete intake', field='consent_given')

    intake.status = Intake.STATUS_COMPLETED
    intake.save(update_fields=['status', 'updated_at'])
    return intake


def record_triage(intake: Intake, *, urgency_level: str, urgency_score: int, recommended_action: str) -> Intake:
    intake.triage_result = {
        'urgency_level': urgency_level,
        'urgency_score': urgency_score,
        'recommended_action': recommended_action,
    }
    intake.save(update_fields=['triage_result', 'updated_at'])
    return intake


def latest_for_email(email: str) -> Intake | None:
    return (
        Intake.objects.filter(email=(email or '').strip().lower())
        .order_by('-created_at', '-id')
        .first()
    )


def expire_stale_intakes(now: datetime | None = None) -> int:
    """Mark draft intakes older than PORTAL_STALE_INTAKE_DAYS as expired."""
    now = now or timezone.now()
    days = int(getattr(settings, 'PORTAL_STALE_INTAKE_DAYS', 30))
    cutoff = now - timedelta(days=days)
    expired = Intake.objects.filter(status=Intake.STATUS_DRAFT, created_at__lt=cutoff).update(
        status=Intake.STATUS_EXPIRED,
        updated_at=now,
    )
    if expired:
        logger.info('Expired %s stale intake forms', expired)
    return expired
