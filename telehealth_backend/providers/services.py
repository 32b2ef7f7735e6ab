"""Provider lookup and queue bookkeeping."""

from __future__ import annotations

from django.db.models import F, Q
from django.db.models.functions import Greatest

from telehealth_backend.providers.models import Provider


def provider_for_user(user) -> Provider | None:
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    email = (user.email or '').lower()
    return Provider.objects.filter(Q(user=user) | Q(email=email)).order_by('id').first()


def providers_for_state(state: str) -> list[Provider]:
    """Active, accepting providers licensed in ``state``, least busy first.

    licensed_states is JSON, so state membership is filtered in Python.
    """
    candidates = Provider.objects.filter(
        status=Provider.STATUS_ACTIVE,
        accepting_patients=True,
    ).order_by('current_queue_size', 'id')
    return [p for p in candidates if p.is_licensed_in(state)]


def pick_provider_for_state(state: str) -> Provider | None:
    matches = providers_for_state(state)
    return matches[0] if matches else None


def increment_queue(provider_id) -> None:
    Provider.objects.filter(pk=provider_id).update(current_queue_size=F('current_queue_size') + 1)


def finish_consultation(provider_id) -> None:
    """Queue -1 (floored at zero) and one more completed consultation."""
    Provider.objects.filter(pk=provider_id).update(
        current_queue_size=Greatest(F('current_queue_size') - 1, 0),
        total_consultations=F('total_consultations') + 1,
    )


def release_queue_slot(provider_id) -> None:
    Provider.objects.filter(pk=provider_id).update(
        current_queue_size=Greatest(F('current_queue_size') - 1, 0),
    )
