"""Tests for log_action and the audit log endpoint."""

from __future__ import annotations

from unittest import mock

from django.test import TestCase

from telehealth_backend.core.models import AuditLog
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.core.utils import log_action


class LogActionTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.provider = make_user("audit_provider", "provider")

    def test_records_actor_and_role(self):
        entry = log_action(self.provider, "prescription_signed", "prescription", 7, changes={"status": "signed"})
        self.assertEqual(entry.actor_email, "audit_provider@example.com")
        self.assertEqual(entry.role_name, "provider")
        self.assertEqual(entry.entity_id, "7")
        self.assertEqual(entry.changes, {"status": "signed"})

    def test_system_actor(self):
        entry = log_action(None, "intake_expired", "intake", None)
        self.assertIsNone(entry.user)
        self.assertEqual(entry.actor_email, "system")
        self.assertEqual(entry.entity_id, "")

    def test_write_failure_returns_none(self):
        with mock.patch.object(AuditLog.objects, "create", side_effect=RuntimeError("db down")):
            self.assertIsNone(log_action(self.provider, "x", "y", 1))


class AuditLogEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.admin = make_user("audit_admin", "admin")
        self.patient = make_user("audit_patient", "patient")
        log_action(self.patient, "intake_completed", "intake", 1)
        log_action(self.patient, "intake_completed", "intake", 2)
        log_action(self.admin, "provider_created", "provider", 1)

    def test_list_filters(self):
        client = client_for(self.admin)
        response = client.get("/api/admin/audit-logs/", {"entity_type": "intake", "entity_id": "2"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["entity_id"], "2")

        response = client.get("/api/admin/audit-logs/", {"actor_email": "AUDIT_PATIENT@example.com"})
        self.assertEqual(len(response.data), 2)

    def test_list_limit(self):
        response = client_for(self.admin).get("/api/admin/audit-logs/", {"limit": "1"})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["action"], "provider_created")

    def test_create_manual_entry(self):
        response = client_for(self.admin).post(
            "/api/admin/audit-logs/",
            {"action": "export", "entity_type": "report", "changes": {"rows": 3}},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["actor_email"], "audit_admin@example.com")
        self.assertEqual(response.data["changes"], {"rows": 3})

    def test_patient_forbidden(self):
        response = client_for(self.patient).get("/api/admin/audit-logs/")
        self.assertEqual(response.status_code, 403)
