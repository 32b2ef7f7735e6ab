"""Account lookup and JWT issuing shared by the login flows."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from rest_framework_simplejwt.tokens import RefreshToken

from telehealth_backend.core import capabilities
from telehealth_backend.core.models import Role

logger = logging.getLogger(__name__)

User = get_user_model()

ROLE_LABELS = {
    Role.PATIENT: 'Patient',
    Role.PROVIDER: 'Provider',
    Role.NURSE: 'Nurse',
    Role.PHARMACY: 'Pharmacy',
    Role.ADMIN: 'Administrator',
}


def get_role(name: str) -> Role:
    role, _ = Role.objects.get_or_create(name=name, defaults={'label': ROLE_LABELS.get(name, name.title())})
    return role


def get_or_create_member(email: str, *, role_name: str = Role.PATIENT):
    """Return the user for ``email``, creating a ``role_name`` user if missing."""
    email = (email or '').strip().lower()
    with transaction.atomic():
        user = User.objects.filter(email=email).first()
        if user is not None:
            return user, False
        user = User(username=email[:150], email=email, role=get_role(role_name))
        user.set_unusable_password()
        user.save()
    logger.info('Created %s account for %s', role_name, email)
    return user, True


def user_payload(user) -> dict:
    role = getattr(user, 'role', None)
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'role': {'id': role.id, 'name': role.name, 'label': role.label} if role else None,
        'capabilities': sorted(capabilities.capabilities_for(user)),
    }


def issue_tokens(user) -> dict:
    """JWT pair plus user info; the refresh token carries a ``role`` claim."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role.name if getattr(user, 'role', None) else None
    return {
        'user': user_payload(user),
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }
