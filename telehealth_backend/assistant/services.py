"""Conversation storage and the chat round-trip."""

from __future__ import annotations

import logging

from django.conf import settings
from django.utils import timezone

from telehealth_backend.assistant.context import build_context
from telehealth_backend.assistant.models import Conversation
from telehealth_backend.assistant.prompts import prompt_for_role
from telehealth_backend.core import capabilities
from telehealth_backend.integrations import llm

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20


def get_or_create_conversation(user) -> Conversation:
    email = (user.email or '').lower()
    conversation = Conversation.objects.filter(user=user).order_by('-updated_at', '-id').first()
    if conversation is None:
        conversation = Conversation.objects.create(
            user=user,
            email=email,
            messages=[],
            user_role=capabilities.role_name_of(user) or '',
        )
    return conversation


def recent_messages(conversation: Conversation, limit: int = HISTORY_LIMIT) -> list[dict]:
    return [
        {'role': m['role'], 'content': m['content']}
        for m in (conversation.messages or [])[-limit:]
        if m.get('role') in ('user', 'assistant')
    ]


def _entry(role: str, content: str, page: str) -> dict:
    return {
        'role': role,
        'content': content,
        'page': page or '',
        'timestamp': timezone.now().isoformat(),
    }


def chat(user, message: str, *, page: str = '', intake=None) -> tuple[Conversation, str]:
    """Send ``message`` with history and role context; store both turns."""
    role_name = capabilities.role_name_of(user) or ''
    conversation = get_or_create_conversation(user)

    system = prompt_for_role(role_name) + '\n\nContext:\n' + build_context(user, role_name, intake=intake)
    messages = [{'role': 'system', 'content': system}]
    messages += recent_messages(conversation)
    messages.append({'role': 'user', 'content': message})

    model = settings.LLM_MODEL
    reply = llm.chat(messages, model=model)

    conversation.messages = list(conversation.messages or []) + [
        _entry('user', message, page),
        _entry('assistant', reply, page),
    ]
    conversation.current_page = page or conversation.current_page
    conversation.user_role = role_name
    conversation.model = model
    update_fields = ['messages', 'current_page', 'user_role', 'model', 'updated_at']
    if intake is not None:
        conversation.intake = intake
        update_fields.append('intake')
    conversation.save(update_fields=update_fields)

    logger.debug('Assistant reply stored for conversation %s', conversation.id)
    return conversation, reply
