"""
Housekeeping jobs for core tables.

Each function returns the number of rows removed and logs when it is
non-zero. Celery tasks in ``tasks.py`` and the ``cleanup`` management
command both call these.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from telehealth_backend.core.models import AuditLog, MagicLinkCode, RateLimit
from telehealth_backend.core.passkeys import delete_expired_challenges

logger = logging.getLogger(__name__)

MAGIC_LINK_RETENTION = timedelta(days=1)


def cleanup_expired_challenges(now: datetime | None = None) -> int:
    deleted = delete_expired_challenges(now=now)
    if deleted:
        logger.info('Deleted %s expired auth challenges', deleted)
    return deleted


def cleanup_magic_link_codes(now: datetime | None = None) -> int:
    now = now or timezone.now()
    cutoff = now - MAGIC_LINK_RETENTION
    deleted, _ = (
        MagicLinkCode.objects.filter(created_at__lt=cutoff)
        .filter(Q(consumed=True) | Q(expires_at__lt=now))
        .delete()
    )
    if deleted:
        logger.info('Deleted %s old magic-link codes', deleted)
    return deleted


def cleanup_expired_rate_limits(now: datetime | None = None) -> int:
    now = now or timezone.now()
    # window lengths vary per key, so expiry is checked row by row
    expired_ids = [
        rl.id
        for rl in RateLimit.objects.filter(window_start__lt=now).only('id', 'window_start', 'window_seconds')
        if rl.is_expired(now)
    ]
    if not expired_ids:
        return 0
    deleted, _ = RateLimit.objects.filter(id__in=expired_ids).delete()
    logger.info('Deleted %s expired rate limit records', deleted)
    return deleted


def purge_old_audit_logs(now: datetime | None = None) -> int:
    now = now or timezone.now()
    days = int(getattr(settings, 'PORTAL_AUDIT_RETENTION_DAYS', 90))
    deleted, _ = AuditLog.objects.filter(timestamp__lt=now - timedelta(days=days)).delete()
    if deleted:
        logger.info('Deleted %s audit log entries older than %s days', deleted, days)
    return deleted
