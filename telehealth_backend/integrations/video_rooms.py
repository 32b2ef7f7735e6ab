"""Daily.co video rooms for consultations."""

from __future__ import annotations

import logging
import time

from django.conf import settings

from telehealth_backend.integrations.client import send_json

logger = logging.getLogger(__name__)

SERVICE = 'daily'
ROOM_TTL_SECONDS = 3600


def create_room(consultation_id) -> dict:
    """Provision a private room plus an owner token.

    Without DAILY_API_KEY a placeholder room is returned so local
    development works offline.
    """
    api_key = getattr(settings, 'DAILY_API_KEY', '')
    if not api_key:
        room_name = f'dev-room-{consultation_id}'
        logger.info('DAILY_API_KEY not set, using placeholder room %s', room_name)
        return {
            'room_url': f'https://demo.daily.co/{room_name}',
            'room_token': 'dev-token',
            'is_dev': True,
        }

    base = getattr(settings, 'DAILY_API_URL', 'https://api.daily.co/v1').rstrip('/')
    prefix = getattr(settings, 'DAILY_ROOM_PREFIX', 'consult')
    room_name = f'{prefix}-{consultation_id}'
    expires = int(time.time()) + ROOM_TTL_SECONDS
    headers = {'Content-Type': 'application/json', 'Authorization': f'Bearer {api_key}'}

    room = send_json(
        SERVICE,
        'POST',
        f'{base}/rooms',
        headers=headers,
        json={
            'name': room_name,
            'privacy': 'private',
            'properties': {
                'exp': expires,
                'eject_at_room_exp': True,
                'enable_screenshare': True,
                'enable_chat': True,
            },
        },
    )
    token = send_json(
        SERVICE,
        'POST',
        f'{base}/meeting-tokens',
        headers=headers,
        json={'properties': {'room_name': room_name, 'exp': expires, 'is_owner': True}},
    )
    return {'room_url': room.get('url'), 'room_token': token.get('token'), 'is_dev': False}
