from celery import shared_task

from telehealth_backend.intake import services


@shared_task
def expire_stale_intakes():
    return services.expire_stale_intakes()
