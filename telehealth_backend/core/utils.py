import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request):
    """Best-effort client address (first X-Forwarded-For hop, else REMOTE_ADDR)."""
    if request is None:
        return None
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return request.META.get('REMOTE_ADDR') or None


def log_action(user, action, entity_type, entity_id=None, changes=None, request=None):
    """Append one row to the admin audit log.

    Returns the new row, or None when the write failed. Never raises: a
    failed audit write is logged and the request carries on.
    """

    role_name = ''
    actor_email = ''
    try:
        role = getattr(user, 'role', None)
        if role is not None:
            role_name = getattr(role, 'name', '') or ''
        actor_email = getattr(user, 'email', '') or ''
    except Exception:
        role_name = ''

    try:
        return AuditLog.objects.create(
            user=user if getattr(user, 'is_authenticated', False) else None,
            actor_email=actor_email or 'system',
            role_name=role_name,
            action=action,
            entity_type=entity_type,
            entity_id='' if entity_id is None else str(entity_id),
            changes=changes,
            ip_address=client_ip(request),
        )
    except Exception:
        logger.exception('AuditLog write failed (action=%s, entity=%s:%s)', action, entity_type, entity_id)
        return None
