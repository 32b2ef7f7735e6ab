"""OpenAI-compatible chat completions client."""

from __future__ import annotations

import logging

from django.conf import settings

from telehealth_backend.core.exceptions import IntegrationError, IntegrationNotConfigured
from telehealth_backend.integrations.client import send_json

logger = logging.getLogger(__name__)

SERVICE = 'llm'


def is_configured() -> bool:
    return bool(getattr(settings, 'LLM_API_KEY', ''))


def chat(messages: list[dict], *, model: str | None = None, max_tokens: int | None = None, temperature: float = 0.4) -> str:
    """Send ``messages`` and return the assistant's reply text."""
    api_key = getattr(settings, 'LLM_API_KEY', '')
    if not api_key:
        raise IntegrationNotConfigured(SERVICE, 'AI assistant is not configured')

    url = f"{settings.LLM_BASE_URL.rstrip('/')}/chat/completions"
    data = {
        'model': model or settings.LLM_MODEL,
        'messages': messages,
        'max_tokens': max_tokens or settings.LLM_MAX_TOKENS,
        'temperature': temperature,
    }
    result = send_json(
        SERVICE,
        'POST',
        url,
        headers={'Authorization': f'Bearer {api_key}', 'Content-Type': 'application/json'},
        json=data,
        timeout=60,
    )
    try:
        return result['choices'][0]['message']['content'].strip()
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        logger.error('Unexpected LLM response shape: %s', str(result)[:500])
        raise IntegrationError(SERVICE, 'AI service returned an unexpected response') from e
