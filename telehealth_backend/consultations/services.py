"""
Consultation lifecycle.

Every status change goes through ``_transition`` which consults
ALLOWED_TRANSITIONS and raises InvalidTransition (409) otherwise.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from telehealth_backend.consultations.models import Consultation
from telehealth_backend.core.exceptions import InvalidTransition, RecordNotFound, ValidationFailed
from telehealth_backend.integrations import video_rooms
from telehealth_backend.providers import services as provider_services

logger = logging.getLogger(__name__)

S = Consultation

ALLOWED_TRANSITIONS = {
    S.STATUS_SCHEDULED: {S.STATUS_SCHEDULED, S.STATUS_IN_PROGRESS, S.STATUS_COMPLETED, S.STATUS_CANCELLED, S.STATUS_NO_SHOW},
    S.STATUS_WAITING: {S.STATUS_SCHEDULED, S.STATUS_ASSIGNED, S.STATUS_CANCELLED, S.STATUS_NO_SHOW},
    S.STATUS_ASSIGNED: {S.STATUS_SCHEDULED, S.STATUS_IN_PROGRESS, S.STATUS_COMPLETED, S.STATUS_CANCELLED, S.STATUS_NO_SHOW},
    S.STATUS_IN_PROGRESS: {S.STATUS_COMPLETED, S.STATUS_CANCELLED},
    S.STATUS_COMPLETED: set(),
    S.STATUS_CANCELLED: set(),
    S.STATUS_NO_SHOW: set(),
}


def _transition(consultation: Consultation, new_status: str) -> None:
    if new_status not in ALLOWED_TRANSITIONS.get(consultation.status, set()):
        raise InvalidTransition(model='Consultation', current=consultation.status, requested=new_status)
    consultation.status = new_status


def waiting_room_cost() -> int:
    return int(getattr(settings, 'PORTAL_WAITING_ROOM_COST_CENTS', 19700))


def create_consultation(*, patient, provider=None, intake=None, type=Consultation.TYPE_VIDEO,
                        scheduled_at=None, patient_state='', cost=0) -> Consultation:
    return Consultation.objects.create(
        patient=patient,
        provider=provider,
        intake=intake,
        type=type,
        status=Consultation.STATUS_SCHEDULED,
        scheduled_at=scheduled_at,
        patient_state=(patient_state or '').upper(),
        cost=cost,
        payment_status=Consultation.PAYMENT_PENDING,
        follow_up_required=False,
    )


def schedule(consultation: Consultation, *, scheduled_at, room_url=None, room_token=None) -> Consultation:
    _transition(consultation, Consultation.STATUS_SCHEDULED)
    consultation.scheduled_at = scheduled_at
    if room_url is not None:
        consultation.room_url = room_url
    if room_token is not None:
        consultation.room_token = room_token
    consultation.save(update_fields=['status', 'scheduled_at', 'room_url', 'room_token', 'updated_at'])
    return consultation


def start(consultation: Consultation) -> Consultation:
    with transaction.atomic():
        _transition(consultation, Consultation.STATUS_IN_PROGRESS)
        consultation.started_at = timezone.now()
        consultation.save(update_fields=['status', 'started_at', 'updated_at'])
        if consultation.provider_id:
            provider_services.increment_queue(consultation.provider_id)
    return consultation


def complete(consultation: Consultation, *, notes=None, diagnosis=None, diagnosis_codes=None,
             treatment_plan=None, follow_up_required=False, follow_up_date=None) -> Consultation:
    now = timezone.now()
    with transaction.atomic():
        _transition(consultation, Consultation.STATUS_COMPLETED)
        consultation.ended_at = now
        if consultation.started_at:
            consultation.duration_minutes = round((now - consultation.started_at).total_seconds() / 60)
        if notes is not None:
            consultation.notes = notes
        if diagnosis is not None:
            consultation.diagnosis = diagnosis
        if diagnosis_codes is not None:
            consultation.diagnosis_codes = diagnosis_codes
        if treatment_plan is not None:
            consultation.treatment_plan = treatment_plan
        consultation.follow_up_required = bool(follow_up_required)
        consultation.follow_up_date = follow_up_date
        consultation.save()
        if consultation.provider_id:
            provider_services.finish_consultation(consultation.provider_id)
    return consultation


def cancel(consultation: Consultation, *, reason: str = '') -> Consultation:
    was_in_progress = consultation.status == Consultation.STATUS_IN_PROGRESS
    with transaction.atomic():
        _transition(consultation, Consultation.STATUS_CANCELLED)
        consultation.notes = reason or ''
        consultation.save(update_fields=['status', 'notes', 'updated_at'])
        if was_in_progress and consultation.provider_id:
            provider_services.release_queue_slot(consultation.provider_id)
    return consultation


def mark_no_show(consultation: Consultation) -> Consultation:
    _transition(consultation, Consultation.STATUS_NO_SHOW)
    consultation.save(update_fields=['status', 'updated_at'])
    return consultation


def create_from_intake(*, intake, patient, patient_state: str, recording: str = '') -> Consultation:
    """Open an in-progress video visit with the least busy licensed provider."""
    state = (patient_state or '').upper()
    provider = provider_services.pick_provider_for_state(state)
    if provider is None:
        raise ValidationFailed(
            f'No active providers licensed in {state}. Please contact support.',
            field='patient_state',
        )

    now = timezone.now()
    with transaction.atomic():
        consultation = Consultation.objects.create(
            patient=patient,
            provider=provider,
            intake=intake,
            type=Consultation.TYPE_VIDEO,
            status=Consultation.STATUS_IN_PROGRESS,
            scheduled_at=now,
            started_at=now,
            recording=recording or '',
            patient_state=state,
            cost=provider.consultation_rate,
            payment_status=Consultation.PAYMENT_PAID,
            chief_complaint=intake.chief_complaint if intake is not None else '',
        )
        provider_services.increment_queue(provider.id)
    logger.info('Consultation %s assigned to provider %s from intake', consultation.id, provider.id)
    return consultation


def enqueue(*, patient, patient_state: str, chief_complaint: str = '', intake=None,
            type=Consultation.TYPE_VIDEO) -> Consultation:
    """Put the patient in the waiting room. No provider until one claims it."""
    return Consultation.objects.create(
        patient=patient,
        provider=None,
        intake=intake,
        type=type,
        status=Consultation.STATUS_WAITING,
        scheduled_at=timezone.now(),
        chief_complaint=chief_complaint or '',
        patient_state=(patient_state or '').upper(),
        cost=waiting_room_cost(),
        payment_status=Consultation.PAYMENT_PENDING,
    )


def claim(consultation_id, *, provider) -> Consultation:
    if provider is None:
        raise RecordNotFound('Provider record not found.')

    with transaction.atomic():
        consultation = Consultation.objects.select_for_update().filter(pk=consultation_id).first()
        if consultation is None:
            raise RecordNotFound('Consultation not found.')
        if consultation.status != Consultation.STATUS_WAITING:
            raise InvalidTransition(
                model='Consultation',
                current=consultation.status,
                requested=Consultation.STATUS_ASSIGNED,
                message='Consultation is no longer waiting.',
            )
        consultation.provider = provider
        consultation.status = Consultation.STATUS_ASSIGNED
        consultation.save(update_fields=['provider', 'status', 'updated_at'])
    return consultation


def provision_room(consultation: Consultation) -> dict:
    room = video_rooms.create_room(consultation.id)
    consultation.room_url = room['room_url'] or ''
    consultation.room_token = room['room_token'] or ''
    consultation.save(update_fields=['room_url', 'room_token', 'updated_at'])
    return room


def waiting_queue(limit: int = 50) -> list[dict]:
    """Waiting consultations, oldest first, with display fields for the queue board."""
    now = timezone.now()
    waiting = (
        Consultation.objects.filter(status=Consultation.STATUS_WAITING)
        .select_related('patient__user', 'intake')
        .order_by('created_at', 'id')[:limit]
    )
    rows = []
    for c in waiting:
        patient = c.patient
        complaint = c.chief_complaint or (c.intake.chief_complaint if c.intake else '')
        rows.append({
            'consultation': c,
            'patient_name': patient.display_name or patient.email or 'Unknown',
            'patient_initials': patient.initials[:2],
            'chief_complaint': complaint or 'Not specified',
            'wait_minutes': max(0, round((now - c.created_at).total_seconds() / 60)),
        })
    return rows


def active_for_patient(patient) -> Consultation | None:
    if patient is None:
        return None
    return (
        Consultation.objects.filter(patient=patient, status__in=Consultation.ACTIVE_STATUSES)
        .order_by('-created_at', '-id')
        .first()
    )
