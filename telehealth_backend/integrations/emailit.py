"""Transactional email through the EmailIt HTTP API."""

from __future__ import annotations

import logging

from django.conf import settings

from telehealth_backend.core.exceptions import IntegrationNotConfigured
from telehealth_backend.integrations.client import send

logger = logging.getLogger(__name__)

SERVICE = 'emailit'


def send_email(to: str, subject: str, text: str, html: str | None = None) -> None:
    api_key = getattr(settings, 'EMAILIT_API_KEY', '')
    if not api_key:
        raise IntegrationNotConfigured(SERVICE, 'Email delivery is not configured')

    sender = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>"
    payload = {'from': sender, 'to': to, 'subject': subject, 'text': text}
    if html:
        payload['html'] = html

    send(
        SERVICE,
        'POST',
        settings.EMAILIT_API_URL,
        headers={'Content-Type': 'application/json', 'Authorization': f'Bearer {api_key}'},
        json=payload,
    )
    logger.info('Email sent to %s (%s)', to, subject)
