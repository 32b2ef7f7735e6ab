from celery import shared_task

from telehealth_backend.core import cleanup


@shared_task
def cleanup_expired_challenges():
    return cleanup.cleanup_expired_challenges()


@shared_task
def cleanup_magic_link_codes():
    return cleanup.cleanup_magic_link_codes()


@shared_task
def cleanup_expired_rate_limits():
    return cleanup.cleanup_expired_rate_limits()


@shared_task
def purge_old_audit_logs():
    return cleanup.purge_old_audit_logs()
