"""
Notification bookkeeping and delivery.

Delivery failures never raise out of ``deliver``; the notification row is
marked failed with the error message in ``metadata['error']``.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from telehealth_backend.core.exceptions import IntegrationError
from telehealth_backend.integrations import emailit
from telehealth_backend.notifications.models import Notification

logger = logging.getLogger(__name__)


def create_notification(
    *,
    recipient_email: str,
    type: str,
    subject: str,
    body: str = '',
    channel: str = Notification.CHANNEL_EMAIL,
    metadata: dict | None = None,
    status: str = Notification.STATUS_PENDING,
    sent_at=None,
) -> Notification:
    email = (recipient_email or '').strip().lower()
    recipient = get_user_model().objects.filter(email=email).first()
    return Notification.objects.create(
        recipient_email=email,
        recipient=recipient,
        type=type,
        channel=channel,
        subject=subject,
        body=body,
        status=status,
        sent_at=sent_at,
        metadata=metadata,
    )


def mark_sent(notification: Notification) -> Notification:
    notification.status = Notification.STATUS_SENT
    notification.sent_at = timezone.now()
    notification.save(update_fields=['status', 'sent_at', 'updated_at'])
    return notification


def mark_failed(notification: Notification, error: str) -> Notification:
    metadata = dict(notification.metadata or {})
    metadata['error'] = error
    notification.status = Notification.STATUS_FAILED
    notification.metadata = metadata
    notification.save(update_fields=['status', 'metadata', 'updated_at'])
    return notification


def mark_read(notification: Notification) -> Notification:
    if notification.read_at is None:
        notification.read_at = timezone.now()
    notification.status = Notification.STATUS_READ
    notification.save(update_fields=['status', 'read_at', 'updated_at'])
    return notification


def mark_all_read(email: str) -> int:
    email = (email or '').strip().lower()
    now = timezone.now()
    return (
        Notification.objects.filter(recipient_email=email, read_at__isnull=True)
        .update(read_at=now, status=Notification.STATUS_READ, updated_at=now)
    )


def unread_count(email: str) -> int:
    email = (email or '').strip().lower()
    return Notification.objects.filter(recipient_email=email, read_at__isnull=True).count()


def deliver(notification: Notification) -> bool:
    """Send an email-channel notification. Returns True on success."""
    if notification.channel != Notification.CHANNEL_EMAIL:
        mark_failed(notification, f'Channel {notification.channel} has no delivery backend')
        return False
    try:
        emailit.send_email(notification.recipient_email, notification.subject, notification.body)
    except IntegrationError as e:
        logger.error('Notification %s delivery failed: %s', notification.pk, e.message)
        mark_failed(notification, e.message)
        return False
    mark_sent(notification)
    return True
