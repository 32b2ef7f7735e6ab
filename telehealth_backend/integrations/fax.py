"""Phaxio fax delivery."""

from __future__ import annotations

import logging

from django.conf import settings

from telehealth_backend.core.exceptions import IntegrationError, IntegrationNotConfigured
from telehealth_backend.integrations.client import send_json

logger = logging.getLogger(__name__)

SERVICE = 'phaxio'


def send_fax(to: str, document: str, *, filename: str = 'prescription.txt') -> str:
    """Send ``document`` as a text file to ``to``. Returns the Phaxio fax id."""
    api_key = getattr(settings, 'PHAXIO_API_KEY', '')
    if not api_key:
        raise IntegrationNotConfigured(SERVICE, 'Phaxio API key not configured')

    result = send_json(
        SERVICE,
        'POST',
        getattr(settings, 'PHAXIO_API_URL', 'https://api.phaxio.com/v2.1/faxes'),
        auth=(api_key, getattr(settings, 'PHAXIO_API_SECRET', '')),
        data={'to': to},
        files={'file': (filename, document.encode('utf-8'), 'text/plain')},
    )
    if not result.get('success'):
        raise IntegrationError(SERVICE, result.get('message') or 'Phaxio API error')

    fax_id = (result.get('data') or {}).get('id')
    return str(fax_id) if fax_id is not None else ''
