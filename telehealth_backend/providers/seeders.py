from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .models import Provider

User = get_user_model()


def seed_providers() -> dict:
    """Active provider profile for the seeded provider account."""
    user = User.objects.filter(email="dr.hart@seed.local").first()
    if user is None:
        return {"providers": 0}

    with transaction.atomic():
        Provider.objects.update_or_create(
            npi_number="1234567893",
            defaults={
                "user": user,
                "email": user.email,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "title": "MD",
                "specialties": ["family_medicine"],
                "licensed_states": ["FL", "TX", "CA"],
                "accepting_patients": True,
                "consultation_rate": 7500,
                "max_daily_consultations": 24,
                "status": Provider.STATUS_ACTIVE,
                "credential_verified_at": timezone.now(),
            },
        )
    return {"providers": 1}
