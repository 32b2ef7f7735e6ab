"""Tests for patient profiles, consent and ID verification."""

from __future__ import annotations

from django.test import TestCase

from telehealth_backend.core.models import AuditLog
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.patients.models import Patient


class PatientModelTest(TestCase):
    databases = {"default"}

    def test_display_name_and_initials(self):
        user = make_user("pm_user", "patient", first_name="Dana", last_name="Lee")
        patient = Patient.objects.create(user=user, email=user.email)
        self.assertEqual(patient.display_name, "Dana Lee")
        self.assertEqual(patient.initials, "DL")
        self.assertEqual(str(patient), "Dana Lee <pm_user@example.com>")

    def test_initials_fall_back_to_email(self):
        user = make_user("zed", "patient")
        patient = Patient.objects.create(user=user, email=user.email)
        self.assertEqual(patient.display_name, "")
        self.assertEqual(patient.initials, "Z")


class PatientEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.patient_user = make_user("pt_self", "patient")
        self.other_user = make_user("pt_other", "patient")
        self.nurse = make_user("pt_nurse", "nurse")
        self.pharmacy = make_user("pt_pharmacy", "pharmacy")
        self.other = Patient.objects.create(user=self.other_user, email=self.other_user.email, state="TX")

    def test_patient_creates_own_profile(self):
        client = client_for(self.patient_user)
        response = client.post(
            "/api/patients/",
            {"state": "fl", "allergies": ["penicillin"], "user": self.other_user.id},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        # patients cannot pick another owner
        self.assertEqual(response.data["user"], self.patient_user.id)
        self.assertEqual(response.data["state"], "FL")

        again = client.post("/api/patients/", {"state": "FL"}, format="json")
        self.assertEqual(again.status_code, 400)

    def test_invalid_lists_and_contact(self):
        client = client_for(self.patient_user)
        response = client.post("/api/patients/", {"allergies": "penicillin"}, format="json")
        self.assertIn("allergies", response.data)

        response = client.post("/api/patients/", {"emergency_contact": {"name": "Sam"}}, format="json")
        self.assertIn("emergency_contact", response.data)

    def test_patient_sees_only_self(self):
        mine = Patient.objects.create(user=self.patient_user, email=self.patient_user.email)
        client = client_for(self.patient_user)

        response = client.get("/api/patients/")
        self.assertEqual([p["id"] for p in response.data], [mine.id])
        self.assertEqual(client.get(f"/api/patients/{self.other.id}/").status_code, 404)
        self.assertEqual(client.get("/api/patients/me/").data["id"], mine.id)

    def test_me_without_profile(self):
        response = client_for(self.patient_user).get("/api/patients/me/")
        self.assertEqual(response.status_code, 404)

    def test_staff_list_and_state_filter(self):
        Patient.objects.create(user=self.patient_user, email=self.patient_user.email, state="FL")
        response = client_for(self.nurse).get("/api/patients/", {"state": "tx"})
        self.assertEqual([p["id"] for p in response.data], [self.other.id])

    def test_pharmacy_forbidden(self):
        self.assertEqual(client_for(self.pharmacy).get("/api/patients/").status_code, 403)

    def test_nurse_updates_any_record(self):
        response = client_for(self.nurse).patch(
            f"/api/patients/{self.other.id}/", {"insurance_provider": "Acme"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["insurance_provider"], "Acme")
        self.assertEqual(AuditLog.objects.get(action="patient_updated").changes, {"fields": ["insurance_provider"]})

    def test_consent(self):
        mine = Patient.objects.create(user=self.patient_user, email=self.patient_user.email)
        response = client_for(self.patient_user).post(f"/api/patients/{mine.id}/consent/")
        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.data["consent_signed_at"])

        response = client_for(self.patient_user).post(f"/api/patients/{self.other.id}/consent/")
        self.assertEqual(response.status_code, 404)

    def test_verify_id(self):
        response = client_for(self.patient_user).post(
            f"/api/patients/{self.other.id}/verify-id/", {"status": "verified"}, format="json",
        )
        self.assertEqual(response.status_code, 403)

        response = client_for(self.nurse).post(
            f"/api/patients/{self.other.id}/verify-id/", {"status": "verified"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id_verification_status"], "verified")
        self.assertIsNotNone(response.data["id_verified_at"])
        entry = AuditLog.objects.get(action="patient_id_verification")
        self.assertEqual(entry.changes, {"from": "pending", "to": "verified"})
