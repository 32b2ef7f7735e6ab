from datetime import date

from django.contrib.auth import get_user_model
from django.db import transaction

from telehealth_backend.pharmacies.models import Pharmacy

from .models import Patient

User = get_user_model()

SEED_PATIENTS = [
    ("patient.lee@seed.local", date(1986, 4, 12), "FL", "Orlando", ["penicillin"], ["lisinopril 10mg"]),
    ("patient.rivera@seed.local", date(1992, 9, 3), "TX", "Austin", [], []),
]


def seed_patients() -> dict:
    count = 0
    with transaction.atomic():
        for email, dob, state, city, allergies, medications in SEED_PATIENTS:
            user = User.objects.filter(email=email).first()
            if user is None:
                continue
            Patient.objects.update_or_create(
                user=user,
                defaults={
                    "email": email,
                    "date_of_birth": dob,
                    "state": state,
                    "city": city,
                    "allergies": allergies,
                    "current_medications": medications,
                    "primary_pharmacy": Pharmacy.objects.filter(state=state).order_by("tier", "id").first(),
                },
            )
            count += 1
    return {"patients": count}
