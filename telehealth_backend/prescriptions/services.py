"""
Prescription, refill and fax workflows.

Pharmacies may move a prescription to any status except out of
``cancelled``. ``filled_at`` is stamped the first time a prescription
reaches a filled status and never moved afterwards.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from telehealth_backend.core.exceptions import (
    IntegrationError,
    InvalidTransition,
    PermissionDenied,
    ValidationFailed,
)
from telehealth_backend.integrations import fax
from telehealth_backend.notifications import services as notifications
from telehealth_backend.notifications.models import Notification
from telehealth_backend.pharmacies.models import Pharmacy
from telehealth_backend.prescriptions.documents import render_prescription
from telehealth_backend.prescriptions.models import FaxLog, Prescription, RefillRequest

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY = timedelta(days=365)

SIGNABLE_STATUSES = {Prescription.STATUS_DRAFT, Prescription.STATUS_PENDING_REVIEW}


def pharmacy_for_user(user) -> Pharmacy | None:
    """Pharmacy accounts are matched to their pharmacy by email."""
    email = (getattr(user, 'email', '') or '').lower()
    if not email:
        return None
    return Pharmacy.objects.filter(email__iexact=email).order_by('id').first()


def _notify_patient(rx: Prescription, type: str, subject: str, body: str) -> None:
    notifications.create_notification(
        recipient_email=rx.patient.email,
        type=type,
        subject=subject,
        body=body,
        channel=Notification.CHANNEL_IN_APP,
        metadata={'prescription': rx.id},
    )


def create_prescription(*, consultation, provider, expires_at=None, prior_auth_required=False, **fields) -> Prescription:
    return Prescription.objects.create(
        consultation=consultation,
        patient=fields.pop('patient', None) or consultation.patient,
        provider=provider,
        expires_at=expires_at or timezone.now() + DEFAULT_VALIDITY,
        prior_auth_required=prior_auth_required,
        prior_auth_status='pending' if prior_auth_required else '',
        status=Prescription.STATUS_DRAFT,
        refills_used=0,
        **fields,
    )


def sign(rx: Prescription, *, provider) -> Prescription:
    if provider is None or rx.provider_id != provider.id:
        raise PermissionDenied('Only the prescribing provider can sign this prescription')
    if rx.status not in SIGNABLE_STATUSES:
        raise InvalidTransition(model='Prescription', current=rx.status, requested=Prescription.STATUS_SIGNED)

    rx.status = Prescription.STATUS_SIGNED
    rx.save(update_fields=['status', 'updated_at'])
    return rx


def send_to_pharmacy(rx: Prescription, *, pharmacy: Pharmacy, e_prescribe_id: str = '') -> Prescription:
    if rx.status != Prescription.STATUS_SIGNED:
        raise ValidationFailed('Prescription must be signed before sending to pharmacy', field='status')

    rx.status = Prescription.STATUS_SENT
    rx.pharmacy = pharmacy
    rx.e_prescribe_id = e_prescribe_id or ''
    rx.sent_to_pharmacy_at = timezone.now()
    rx.save(update_fields=['status', 'pharmacy', 'e_prescribe_id', 'sent_to_pharmacy_at', 'updated_at'])

    _notify_patient(
        rx,
        'prescription_sent',
        'Your prescription was sent to the pharmacy',
        f'{rx.medication_name} was sent to {pharmacy.name}.',
    )
    return rx


def update_status(rx: Prescription, new_status: str) -> Prescription:
    if rx.status == Prescription.STATUS_CANCELLED and new_status != rx.status:
        raise InvalidTransition(model='Prescription', current=rx.status, requested=new_status)

    rx.status = new_status
    update_fields = ['status', 'updated_at']
    if new_status in Prescription.FILLED_STATUSES and rx.filled_at is None:
        rx.filled_at = timezone.now()
        update_fields.append('filled_at')
        if rx.refills_remaining:
            rx.next_refill_date = rx.filled_at + timedelta(days=rx.days_supply)
            update_fields.append('next_refill_date')
    rx.save(update_fields=update_fields)

    if new_status == Prescription.STATUS_READY:
        _notify_patient(rx, 'prescription_ready', 'Your prescription is ready', f'{rx.medication_name} is ready.')
    return rx


def request_refill(rx: Prescription, *, patient, pharmacy=None) -> RefillRequest:
    if patient is not None and rx.patient_id != patient.id:
        raise PermissionDenied('Prescription does not belong to this patient')
    if rx.refills_used >= rx.refills_authorized:
        raise ValidationFailed('No refills remaining on this prescription')
    if rx.expires_at <= timezone.now():
        raise ValidationFailed('This prescription has expired')

    return RefillRequest.objects.create(
        prescription=rx,
        patient=rx.patient,
        pharmacy=pharmacy or rx.pharmacy,
        status=RefillRequest.STATUS_REQUESTED,
    )


def _ensure_open(refill: RefillRequest, requested: str) -> None:
    if refill.status != RefillRequest.STATUS_REQUESTED:
        raise InvalidTransition(model='RefillRequest', current=refill.status, requested=requested)


def approve_refill(refill: RefillRequest, *, provider=None) -> RefillRequest:
    with transaction.atomic():
        refill = RefillRequest.objects.select_for_update().select_related('prescription').get(pk=refill.pk)
        _ensure_open(refill, RefillRequest.STATUS_APPROVED)
        rx = Prescription.objects.select_for_update().get(pk=refill.prescription_id)
        if rx.refills_used >= rx.refills_authorized:
            raise ValidationFailed('No refills remaining on this prescription')

        refill.status = RefillRequest.STATUS_APPROVED
        refill.processed_at = timezone.now()
        refill.processed_by = provider
        refill.save(update_fields=['status', 'processed_at', 'processed_by'])

        rx.refills_used += 1
        rx.next_refill_date = None
        rx.save(update_fields=['refills_used', 'next_refill_date', 'updated_at'])

    _notify_patient(rx, 'refill_approved', 'Your refill was approved', f'Refill approved for {rx.medication_name}.')
    return refill


def deny_refill(refill: RefillRequest, *, reason: str, provider=None) -> RefillRequest:
    _ensure_open(refill, RefillRequest.STATUS_DENIED)
    refill.status = RefillRequest.STATUS_DENIED
    refill.processed_at = timezone.now()
    refill.processed_by = provider
    refill.denial_reason = reason
    refill.save(update_fields=['status', 'processed_at', 'processed_by', 'denial_reason'])

    rx = refill.prescription
    _notify_patient(rx, 'refill_denied', 'Your refill was denied', reason or '')
    return refill


def update_fax_status(log: FaxLog, new_status: str, *, provider_fax_id=None, error_message=None, pages=None) -> FaxLog:
    now = timezone.now()
    log.status = new_status
    if provider_fax_id is not None:
        log.provider_fax_id = provider_fax_id
    if error_message is not None:
        log.error_message = error_message
    if pages is not None:
        log.pages = pages
    if new_status == FaxLog.STATUS_SENT:
        log.sent_at = now
    elif new_status == FaxLog.STATUS_CONFIRMED:
        log.confirmed_at = now
    elif new_status == FaxLog.STATUS_FAILED:
        log.attempts += 1
    log.save()
    return log


def fax_prescription(rx: Prescription, pharmacy: Pharmacy) -> FaxLog:
    """Fax the rendered prescription. The log is kept even when sending fails.

    Raises IntegrationError after recording the failure on the log.
    """
    if not pharmacy.fax:
        raise ValidationFailed('Pharmacy has no fax number', field='pharmacy')

    log = FaxLog.objects.create(
        prescription=rx,
        pharmacy=pharmacy,
        fax_number=pharmacy.fax,
        status=FaxLog.STATUS_QUEUED,
        attempts=0,
        pages=1,
    )
    document = render_prescription(rx)

    try:
        fax_id = fax.send_fax(pharmacy.fax, document, filename=f'prescription-{rx.pk}.txt')
    except IntegrationError as e:
        logger.error('Fax for prescription %s failed: %s', rx.pk, e.message)
        update_fax_status(log, FaxLog.STATUS_FAILED, error_message=e.message)
        e.meta['fax_log'] = log.id
        raise

    return update_fax_status(log, FaxLog.STATUS_SENDING, provider_fax_id=fax_id)
