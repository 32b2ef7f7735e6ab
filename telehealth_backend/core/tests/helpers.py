"""Shared fixtures for the portal test suites."""

from __future__ import annotations

from rest_framework.test import APIClient

from telehealth_backend.core.accounts import get_role
from telehealth_backend.core.models import User


def make_user(username: str, role_name: str | None, **extra) -> User:
    return User.objects.db_manager("default").create_user(
        username=username,
        email=extra.pop("email", f"{username}@example.com"),
        password="DummyPass123!",
        role=get_role(role_name) if role_name else None,
        **extra,
    )


def client_for(user: User | None = None) -> APIClient:
    client = APIClient()
    client.defaults["HTTP_HOST"] = "localhost"
    if user is not None:
        client.force_authenticate(user=user)
    return client
