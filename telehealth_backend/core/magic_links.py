"""
Magic-link verification codes.

A code is six digits, valid for PORTAL_MAGIC_LINK_EXPIRY and single use.
Storing a new code for an email consumes every earlier open code, so only
the most recent code can ever be redeemed.
"""

from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime, timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from telehealth_backend.core.exceptions import RateLimitExceeded, ValidationFailed
from telehealth_backend.core.models import MagicLinkCode

logger = logging.getLogger(__name__)

CODE_RE = re.compile(r'^\d{6}$')


def _expiry() -> timedelta:
    return getattr(settings, 'PORTAL_MAGIC_LINK_EXPIRY', timedelta(minutes=10))


def code_lifetime_minutes() -> int:
    return max(1, int(_expiry().total_seconds() // 60))


def _resend_interval() -> timedelta:
    return getattr(settings, 'PORTAL_MAGIC_LINK_RESEND_INTERVAL', timedelta(seconds=60))


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def generate_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def ensure_can_send(email: str, *, now: datetime | None = None) -> None:
    """Raise RateLimitExceeded if a code went out within the resend interval."""
    email = normalize_email(email)
    now = now or timezone.now()
    latest = MagicLinkCode.objects.filter(email=email).order_by('-created_at').first()
    if latest is None:
        return
    next_allowed = latest.created_at + _resend_interval()
    if next_allowed > now:
        wait_ms = int((next_allowed - now).total_seconds() * 1000)
        raise RateLimitExceeded(
            'Please wait before requesting another code.',
            retry_after_ms=wait_ms,
        )


def store_code(email: str, code: str, *, now: datetime | None = None) -> MagicLinkCode:
    email = normalize_email(email)
    now = now or timezone.now()
    with transaction.atomic():
        MagicLinkCode.objects.filter(email=email, consumed=False).update(consumed=True)
        return MagicLinkCode.objects.create(
            email=email,
            code=code,
            expires_at=now + _expiry(),
            created_at=now,
        )


def issue_code(email: str, *, now: datetime | None = None) -> MagicLinkCode:
    """Check the resend interval, then generate and store a fresh code."""
    ensure_can_send(email, now=now)
    return store_code(email, generate_code(), now=now)


def clean_code(code) -> str:
    cleaned = str(code or '').strip()
    if not CODE_RE.match(cleaned):
        raise ValidationFailed('Code must be 6 digits.', field='code')
    return cleaned


def verify_code(email: str, code: str, *, now: datetime | None = None) -> bool:
    """Consume a matching open code. Returns False when none is valid."""
    email = normalize_email(email)
    code = clean_code(code)
    now = now or timezone.now()

    with transaction.atomic():
        record = (
            MagicLinkCode.objects.select_for_update()
            .filter(email=email, code=code, consumed=False, expires_at__gt=now)
            .order_by('-created_at')
            .first()
        )
        if record is None:
            logger.info('Magic-link verification failed for %s', email)
            return False
        record.consumed = True
        record.save(update_fields=['consumed'])
    return True
