"""
Fixed-window rate limiting backed by the RateLimit table.

A window for a key is active while ``window_start + window_seconds >= now``.
Once it lapses, the next call starts a fresh window with count 1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from rest_framework.exceptions import Throttled

from telehealth_backend.core.exceptions import RateLimitExceeded
from telehealth_backend.core.models import RateLimit
from telehealth_backend.core.utils import client_ip

logger = logging.getLogger(__name__)


def _default_max() -> int:
    return int(getattr(settings, 'PORTAL_RATE_LIMIT_DEFAULT_MAX', 60))


def _default_window() -> int:
    return int(getattr(settings, 'PORTAL_RATE_LIMIT_DEFAULT_WINDOW_SECONDS', 60))


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of check_and_increment."""
    allowed: bool
    remaining: int
    reset_at: datetime

    @property
    def retry_after_ms(self) -> int:
        if self.allowed:
            return 0
        delta = self.reset_at - timezone.now()
        return max(0, int(delta.total_seconds() * 1000))

    def to_dict(self) -> dict:
        return {
            'allowed': self.allowed,
            'remaining': self.remaining,
            'reset_at': self.reset_at.isoformat(),
        }


@dataclass(frozen=True)
class RateLimitStatus:
    """Read-only view of a key's current window."""
    limited: bool
    remaining: int
    reset_at: datetime | None

    def to_dict(self) -> dict:
        return {
            'limited': self.limited,
            'remaining': self.remaining,
            'reset_at': self.reset_at.isoformat() if self.reset_at else None,
        }


def check_and_increment(
    key: str,
    *,
    max_requests: int | None = None,
    window_seconds: int | None = None,
    now: datetime | None = None,
) -> RateLimitResult:
    """Count one request against ``key`` and report whether it is allowed."""
    max_requests = max_requests or _default_max()
    window_seconds = window_seconds or _default_window()
    now = now or timezone.now()

    with transaction.atomic():
        existing = RateLimit.objects.select_for_update().filter(key=key).first()

        if existing is None or existing.is_expired(now):
            if existing is not None:
                existing.delete()
            RateLimit.objects.create(
                key=key,
                count=1,
                window_start=now,
                window_seconds=window_seconds,
            )
            return RateLimitResult(
                allowed=True,
                remaining=max_requests - 1,
                reset_at=now + timedelta(seconds=window_seconds),
            )

        if existing.count >= max_requests:
            logger.info('Rate limit hit for key=%s (count=%s)', key, existing.count)
            return RateLimitResult(allowed=False, remaining=0, reset_at=existing.reset_at)

        previous = existing.count
        existing.count = previous + 1
        existing.save(update_fields=['count'])
        return RateLimitResult(
            allowed=True,
            remaining=max_requests - previous - 1,
            reset_at=existing.reset_at,
        )


def peek(key: str, *, max_requests: int | None = None, now: datetime | None = None) -> RateLimitStatus:
    """Report the status of ``key`` without counting a request."""
    max_requests = max_requests or _default_max()
    now = now or timezone.now()

    existing = RateLimit.objects.filter(key=key).first()
    if existing is None or existing.is_expired(now):
        return RateLimitStatus(limited=False, remaining=max_requests, reset_at=None)

    return RateLimitStatus(
        limited=existing.count >= max_requests,
        remaining=max(0, max_requests - existing.count),
        reset_at=existing.reset_at,
    )


def reset(key: str) -> bool:
    """Drop the counter for ``key``. Returns True if one existed."""
    deleted, _ = RateLimit.objects.filter(key=key).delete()
    return deleted > 0


def enforce(key: str, *, max_requests: int | None = None, window_seconds: int | None = None) -> RateLimitResult:
    """check_and_increment, raising RateLimitExceeded when not allowed."""
    result = check_and_increment(key, max_requests=max_requests, window_seconds=window_seconds)
    if not result.allowed:
        raise RateLimitExceeded(retry_after_ms=result.retry_after_ms)
    return result


class RateLimitMixin:
    """View mixin applying a fixed-window limit to unsafe methods.

    Keys are ``<scope>:user:<id>`` for authenticated callers and
    ``<scope>:ip:<addr>`` otherwise.
    """

    rate_limit_scope: str = ''
    rate_limit_max_requests: int | None = None
    rate_limit_window_seconds: int | None = None
    rate_limit_methods = ('POST', 'PUT', 'PATCH', 'DELETE')

    def rate_limit_key(self, request) -> str:
        scope = self.rate_limit_scope or self.__class__.__name__
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            return f"{scope}:user:{user.pk}"
        return f"{scope}:ip:{client_ip(request) or 'unknown'}"

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        if request.method not in self.rate_limit_methods:
            return
        result = check_and_increment(
            self.rate_limit_key(request),
            max_requests=self.rate_limit_max_requests,
            window_seconds=self.rate_limit_window_seconds,
        )
        if not result.allowed:
            raise Throttled(wait=max(1, (result.retry_after_ms + 999) // 1000))
