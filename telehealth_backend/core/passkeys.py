"""
Passkey challenges and stored credentials.

The server never sees a private key. It hands out random challenges, stores
the public key the browser registers, and tracks the signature counter so a
cloned authenticator can be spotted.
"""

from __future__ import annotations

import base64
import logging
import secrets
from datetime import datetime, timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from telehealth_backend.core.exceptions import RecordNotFound, ValidationFailed
from telehealth_backend.core.models import AuthChallenge, Passkey
from telehealth_backend.core.ratelimit import enforce

logger = logging.getLogger(__name__)

CHALLENGE_BYTES = 32


def _challenge_expiry() -> timedelta:
    return getattr(settings, 'PORTAL_CHALLENGE_EXPIRY', timedelta(minutes=5))


def generate_challenge() -> str:
    raw = secrets.token_bytes(CHALLENGE_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')


def challenge_rate_key(email: str | None, fingerprint: str | None) -> str:
    ident = (email or '').strip().lower() or (fingerprint or '').strip() or 'anonymous'
    return f"passkey_challenge:{ident}"


def create_challenge(
    *,
    type: str,
    email: str | None = None,
    fingerprint: str | None = None,
    now: datetime | None = None,
) -> AuthChallenge:
    if type not in (AuthChallenge.TYPE_REGISTRATION, AuthChallenge.TYPE_AUTHENTICATION):
        raise ValidationFailed(f"Unknown challenge type '{type}'.", field='type')

    now = now or timezone.now()
    key = challenge_rate_key(email, fingerprint)
    enforce(
        key,
        max_requests=int(getattr(settings, 'PORTAL_CHALLENGE_MAX_REQUESTS', 10)),
        window_seconds=int(getattr(settings, 'PORTAL_CHALLENGE_WINDOW_SECONDS', 60)),
    )

    return AuthChallenge.objects.create(
        challenge=generate_challenge(),
        email=(email or '').strip().lower(),
        type=type,
        rate_limit_key=key,
        expires_at=now + _challenge_expiry(),
        created_at=now,
    )


def consume_challenge(challenge: str, *, type: str, now: datetime | None = None) -> AuthChallenge:
    """Delete and return a live challenge of ``type``.

    Expired challenges are deleted as well, then reported as invalid.
    """
    now = now or timezone.now()
    with transaction.atomic():
        record = AuthChallenge.objects.select_for_update().filter(challenge=challenge, type=type).first()
        if record is None:
            raise ValidationFailed('Invalid or expired challenge.', field='challenge')
        expired = record.expires_at < now
        record.delete()
    if expired:
        raise ValidationFailed('Invalid or expired challenge.', field='challenge')
    return record


def register_credential(
    user,
    *,
    challenge: str,
    credential_id: str,
    public_key: str,
    counter: int = 0,
    device_type: str = '',
    backed_up: bool = False,
    transports: list | None = None,
) -> Passkey:
    consume_challenge(challenge, type=AuthChallenge.TYPE_REGISTRATION)

    if Passkey.objects.filter(credential_id=credential_id).exists():
        raise ValidationFailed('Credential already registered.', field='credential_id')

    try:
        with transaction.atomic():
            return Passkey.objects.create(
                user=user,
                email=(user.email or '').lower(),
                credential_id=credential_id,
                public_key=public_key,
                counter=counter,
                device_type=device_type or '',
                backed_up=bool(backed_up),
                transports=list(transports or []),
            )
    except IntegrityError as exc:
        raise ValidationFailed('Credential already registered.', field='credential_id') from exc


def authenticate(*, challenge: str, credential_id: str, counter: int, now: datetime | None = None) -> Passkey:
    """Consume an authentication challenge and advance the stored counter."""
    now = now or timezone.now()
    consume_challenge(challenge, type=AuthChallenge.TYPE_AUTHENTICATION, now=now)

    with transaction.atomic():
        passkey = Passkey.objects.select_for_update().select_related('user').filter(credential_id=credential_id).first()
        if passkey is None:
            raise RecordNotFound('Unknown credential.', field='credential_id')

        if not (passkey.counter == 0 and counter == 0) and counter <= passkey.counter:
            logger.warning(
                'Passkey counter did not advance for credential %s (stored=%s, presented=%s)',
                credential_id, passkey.counter, counter,
            )
            raise ValidationFailed('Credential counter did not advance.', field='counter')

        passkey.counter = counter
        passkey.login_count += 1
        passkey.last_used_at = now
        passkey.save(update_fields=['counter', 'login_count', 'last_used_at'])
    return passkey


def delete_expired_challenges(*, now: datetime | None = None) -> int:
    now = now or timezone.now()
    deleted, _ = AuthChallenge.objects.filter(expires_at__lt=now).delete()
    return deleted
