"""Tests for the seed management command."""

from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from telehealth_backend.core.models import User
from telehealth_backend.patients.models import Patient
from telehealth_backend.pharmacies.models import Pharmacy
from telehealth_backend.prescriptions.services import pharmacy_for_user
from telehealth_backend.providers.models import Provider
from telehealth_backend.providers.services import provider_for_user


class SeedCommandTest(TestCase):
    databases = {"default"}

    def _seed(self, *args):
        out = StringIO()
        call_command("seed", *args, stdout=out)
        return out.getvalue()

    def test_seed_is_repeatable(self):
        output = self._seed()
        self.assertIn("Seeding finished.", output)
        self._seed()

        self.assertEqual(User.objects.filter(email__endswith="@seed.local").count(), 6)
        self.assertEqual(Patient.objects.count(), 2)
        self.assertEqual(Provider.objects.count(), 1)

    def test_seed_accounts_are_linked(self):
        self._seed()
        doctor = User.objects.get(username="dr.hart")
        self.assertEqual(doctor.role.name, "provider")
        self.assertTrue(doctor.check_password("test1234"))
        self.assertIsNotNone(provider_for_user(doctor))

        pharmacy_user = User.objects.get(username="pharmacy.main")
        self.assertEqual(pharmacy_for_user(pharmacy_user), Pharmacy.objects.get(email="pharmacy.main@seed.local"))

        lee = Patient.objects.get(email="patient.lee@seed.local")
        self.assertEqual(lee.state, "FL")

    def test_flush(self):
        self._seed()
        self._seed("--flush")
        self.assertEqual(User.objects.filter(email__endswith="@seed.local").count(), 6)
