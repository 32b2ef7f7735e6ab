"""Tests for the intake lifecycle and endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from telehealth_backend.core.exceptions import InvalidTransition, ValidationFailed
from telehealth_backend.core.models import AuditLog
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.intake import services
from telehealth_backend.intake.models import Intake
from telehealth_backend.patients.models import Patient


class IntakeServiceTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.intake = services.create_intake(email=" Lee@Example.com ", chief_complaint="rash")

    def test_create_defaults(self):
        self.assertEqual(self.intake.email, "lee@example.com")
        self.assertEqual(self.intake.status, Intake.STATUS_DRAFT)
        self.assertEqual(self.intake.completed_steps, [])
        self.assertFalse(self.intake.consent_given)

    def test_steps_are_recorded_once(self):
        services.record_step(self.intake, "symptoms", {"itching": True})
        services.record_step(self.intake, "symptoms", {"itching": False})
        services.record_step(self.intake, "photos", {"count": 2})

        self.intake.refresh_from_db()
        self.assertEqual(self.intake.status, Intake.STATUS_IN_PROGRESS)
        self.assertEqual(self.intake.completed_steps, ["symptoms", "photos"])
        self.assertEqual(self.intake.current_symptoms, {"itching": False})

    def test_step_coercion(self):
        services.record_step(self.intake, "consent", {"value": True})
        services.record_step(self.intake, "severity", "7")
        services.record_step(self.intake, "symptom_duration", 3)
        self.intake.refresh_from_db()
        self.assertTrue(self.intake.consent_given)
        self.assertEqual(self.intake.severity_level, 7)
        self.assertEqual(self.intake.symptom_duration, "3")

    def test_severity_out_of_range(self):
        for value in (0, 11, "high"):
            with self.assertRaises(ValidationFailed):
                services.record_step(self.intake, "severity", value)

    def test_complete_requires_consent(self):
        with self.assertRaises(ValidationFailed) as ctx:
            services.complete_intake(self.intake)
        self.assertEqual(ctx.exception.message, "Patient consent is required to complete intake")

        services.record_step(self.intake, "consent", True)
        services.complete_intake(self.intake)
        self.assertEqual(self.intake.status, Intake.STATUS_COMPLETED)

    def test_closed_intake_rejects_changes(self):
        services.record_step(self.intake, "consent", True)
        services.complete_intake(self.intake)
        with self.assertRaises(InvalidTransition):
            services.record_step(self.intake, "allergies", ["latex"])
        with self.assertRaises(InvalidTransition):
            services.complete_intake(self.intake)

    def test_latest_for_email(self):
        newer = services.create_intake(email="lee@example.com")
        self.assertEqual(services.latest_for_email("LEE@example.com"), newer)
        self.assertIsNone(services.latest_for_email("nobody@example.com"))

    def test_expire_stale_intakes(self):
        old_draft = services.create_intake(email="a@example.com")
        old_started = services.create_intake(email="b@example.com")
        services.record_step(old_started, "symptoms", {})
        Intake.objects.filter(pk__in=[old_draft.pk, old_started.pk]).update(
            created_at=timezone.now() - timedelta(days=31),
        )

        self.assertEqual(services.expire_stale_intakes(), 1)
        old_draft.refresh_from_db()
        old_started.refresh_from_db()
        self.intake.refresh_from_db()
        self.assertEqual(old_draft.status, Intake.STATUS_EXPIRED)
        self.assertEqual(old_started.status, Intake.STATUS_IN_PROGRESS)
        self.assertEqual(self.intake.status, Intake.STATUS_DRAFT)


class IntakeEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.patient_user = make_user("in_patient", "patient")
        self.patient = Patient.objects.create(user=self.patient_user, email=self.patient_user.email)
        self.nurse = make_user("in_nurse", "nurse")
        self.pharmacy = make_user("in_pharmacy", "pharmacy")
        self.foreign = services.create_intake(email="someone.else@example.com")

    def test_patient_create_uses_own_identity(self):
        response = client_for(self.patient_user).post(
            "/api/intakes/",
            {"email": "someone.else@example.com", "chief_complaint": "cough"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["email"], "in_patient@example.com")
        self.assertEqual(response.data["patient"], self.patient.id)
        self.assertEqual(response.data["status"], "draft")

    def test_reviewer_creates_for_email(self):
        response = client_for(self.nurse).post(
            "/api/intakes/", {"email": "walkin@example.com"}, format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["email"], "walkin@example.com")

    def test_scoping(self):
        own = services.create_intake(email=self.patient_user.email)
        client = client_for(self.patient_user)
        self.assertEqual([i["id"] for i in client.get("/api/intakes/").data], [own.id])
        self.assertEqual(client.get(f"/api/intakes/{self.foreign.id}/").status_code, 404)
        self.assertEqual(len(client_for(self.nurse).get("/api/intakes/").data), 2)
        self.assertEqual(client_for(self.pharmacy).get("/api/intakes/").status_code, 403)

    def test_latest(self):
        client = client_for(self.patient_user)
        self.assertEqual(client.get("/api/intakes/latest/").status_code, 404)
        own = services.create_intake(email=self.patient_user.email)
        self.assertEqual(client.get("/api/intakes/latest/").data["id"], own.id)

    def test_step_and_complete(self):
        own = services.create_intake(email=self.patient_user.email)
        client = client_for(self.patient_user)

        response = client.post(f"/api/intakes/{own.id}/complete/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Patient consent is required to complete intake")

        response = client.post(f"/api/intakes/{own.id}/steps/", {"step": "consent", "data": True}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["completed_steps"], ["consent"])

        response = client.post(f"/api/intakes/{own.id}/complete/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["intake"]["status"], "completed")

        response = client.post(f"/api/intakes/{own.id}/steps/", {"step": "allergies", "data": []}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["current_status"], "completed")

    def test_step_is_audited(self):
        own = services.create_intake(email=self.patient_user.email)
        response = client_for(self.patient_user).post(
            f"/api/intakes/{own.id}/steps/", {"step": "consent", "data": True}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        audit = AuditLog.objects.get(action="intake_step_recorded")
        self.assertEqual(audit.entity_type, "intake")
        self.assertEqual(audit.entity_id, str(own.id))
        self.assertEqual(audit.changes, {"step": "consent"})
        self.assertEqual(audit.actor_email, "in_patient@example.com")

    def test_invalid_severity_step(self):
        own = services.create_intake(email=self.patient_user.email)
        response = client_for(self.patient_user).post(
            f"/api/intakes/{own.id}/steps/", {"step": "severity", "data": 12}, format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "data")

    def test_triage_requires_reviewer(self):
        payload = {"urgency_level": "high", "urgency_score": 80, "recommended_action": "See a provider today"}
        response = client_for(self.patient_user).post(f"/api/intakes/{self.foreign.id}/triage/", payload, format="json")
        self.assertEqual(response.status_code, 403)

        response = client_for(self.nurse).post(f"/api/intakes/{self.foreign.id}/triage/", payload, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["triage_result"]["urgency_level"], "high")

        bad = dict(payload, urgency_level="severe")
        response = client_for(self.nurse).post(f"/api/intakes/{self.foreign.id}/triage/", bad, format="json")
        self.assertEqual(response.status_code, 400)
