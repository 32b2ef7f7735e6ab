"""Tests for the provider directory, queue bookkeeping and NPI checks."""

from __future__ import annotations

from unittest import mock

from django.test import TestCase

from telehealth_backend.core.models import AuditLog
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.integrations.npi_registry import NpiResult
from telehealth_backend.providers import services
from telehealth_backend.providers.models import Provider


def make_provider(npi, *, states=("FL",), status=Provider.STATUS_ACTIVE, queue=0, **extra):
    defaults = {
        "email": f"dr{npi[-3:]}@example.com",
        "first_name": "Jane",
        "last_name": f"Doc{npi[-3:]}",
        "title": "MD",
        "npi_number": npi,
        "licensed_states": list(states),
        "status": status,
        "current_queue_size": queue,
    }
    defaults.update(extra)
    return Provider.objects.create(**defaults)


class ProviderServiceTest(TestCase):
    databases = {"default"}

    def test_providers_for_state_orders_by_queue(self):
        busy = make_provider("1000000001", states=["fl", "TX"], queue=3)
        idle = make_provider("1000000002", queue=0)
        make_provider("1000000003", status=Provider.STATUS_ONBOARDING)
        make_provider("1000000004", accepting_patients=False)
        make_provider("1000000005", states=["CA"])

        self.assertEqual(services.providers_for_state("fl"), [idle, busy])
        self.assertEqual(services.pick_provider_for_state("TX"), busy)
        self.assertIsNone(services.pick_provider_for_state("NY"))

    def test_queue_counters(self):
        provider = make_provider("1000000010", queue=0)
        services.increment_queue(provider.id)
        services.finish_consultation(provider.id)
        services.finish_consultation(provider.id)
        provider.refresh_from_db()
        self.assertEqual(provider.current_queue_size, 0)
        self.assertEqual(provider.total_consultations, 2)

        services.release_queue_slot(provider.id)
        provider.refresh_from_db()
        self.assertEqual(provider.current_queue_size, 0)

    def test_provider_for_user_matches_email(self):
        user = make_user("dr_match", "provider")
        provider = make_provider("1000000020", email="dr_match@example.com")
        self.assertEqual(services.provider_for_user(user), provider)

    def test_display_name(self):
        provider = make_provider("1000000030", first_name="Ana", last_name="Hart", title="NP")
        self.assertEqual(provider.display_name, "Ana Hart, NP")


class ProviderEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.admin = make_user("prov_admin", "admin")
        self.patient = make_user("prov_patient", "patient")
        self.doctor_user = make_user("prov_doctor", "provider")
        self.doctor = make_provider("1000000100", user=self.doctor_user, states=["FL"])
        self.colleague = make_provider("1000000200", states=["CA"])

    def test_list_by_state(self):
        response = client_for(self.patient).get("/api/providers/", {"state": "ca"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["id"] for p in response.data], [self.colleague.id])

    def test_create_requires_provider_manage(self):
        payload = {
            "email": "New.Doc@Example.com",
            "first_name": "New",
            "last_name": "Doc",
            "title": "DO",
            "npi_number": "1000000300",
            "licensed_states": ["tx", "TX", "fl"],
        }
        self.assertEqual(client_for(self.doctor_user).post("/api/providers/", payload, format="json").status_code, 403)

        response = client_for(self.admin).post("/api/providers/", payload, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], Provider.STATUS_ONBOARDING)
        self.assertEqual(response.data["licensed_states"], ["TX", "FL"])
        self.assertEqual(response.data["email"], "new.doc@example.com")

    def test_duplicate_npi_rejected(self):
        response = client_for(self.admin).post(
            "/api/providers/",
            {"email": "x@example.com", "first_name": "X", "last_name": "Y", "title": "MD", "npi_number": "1000000100"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("npi_number", response.data)

    def test_provider_edits_own_availability_only(self):
        client = client_for(self.doctor_user)
        response = client.post(
            f"/api/providers/{self.doctor.id}/availability/",
            {"accepting_patients": False, "availability": {"mon": ["09:00-17:00"]}},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["accepting_patients"])
        self.assertEqual(response.data["availability"], {"mon": ["09:00-17:00"]})
        self.assertEqual(
            AuditLog.objects.get(action="provider_availability_updated").changes,
            {"accepting_patients": False, "availability": {"mon": ["09:00-17:00"]}},
        )

        response = client.post(
            f"/api/providers/{self.colleague.id}/availability/", {"accepting_patients": False}, format="json",
        )
        self.assertEqual(response.status_code, 403)

    def test_status_change(self):
        response = client_for(self.admin).post(
            f"/api/providers/{self.colleague.id}/status/", {"status": "suspended"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(AuditLog.objects.get(action="provider_status_changed").changes, {"from": "active", "to": "suspended"})

        response = client_for(self.doctor_user).post(
            f"/api/providers/{self.colleague.id}/status/", {"status": "active"}, format="json",
        )
        self.assertEqual(response.status_code, 403)


class VerifyNpiEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.admin = make_user("npi_admin", "admin")
        self.provider = make_provider("1234567893")

    @mock.patch("telehealth_backend.integrations.npi_registry.verify_npi")
    def test_verified_stamps_provider(self, verify_npi):
        verify_npi.return_value = NpiResult(verified=True, npi_number="1234567893", first_name="JANE")
        response = client_for(self.admin).post(
            "/api/providers/verify-npi/", {"npi_number": "1234567893"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["verified"])
        self.assertEqual(response.data["provider"], self.provider.id)
        self.provider.refresh_from_db()
        self.assertIsNotNone(self.provider.credential_verified_at)

    @mock.patch("telehealth_backend.integrations.npi_registry.verify_npi")
    def test_unverified_leaves_provider_alone(self, verify_npi):
        verify_npi.return_value = NpiResult(
            verified=False, npi_number="1234567893", issues=["NPI number not found in the national registry"],
        )
        response = client_for(self.admin).post(
            "/api/providers/verify-npi/", {"npi_number": "1234567893", "provider": self.provider.id}, format="json",
        )
        self.assertFalse(response.data["verified"])
        self.assertNotIn("provider", response.data)
        self.provider.refresh_from_db()
        self.assertIsNone(self.provider.credential_verified_at)

    @mock.patch("telehealth_backend.integrations.npi_registry.check_prescribing_authority")
    @mock.patch("telehealth_backend.integrations.npi_registry.verify_npi")
    def test_prescribing_flag(self, verify_npi, check):
        verify_npi.return_value = NpiResult(verified=True, npi_number="1234567893")
        check.return_value = {"can_prescribe": True, "reason": "ok"}
        response = client_for(self.admin).post(
            "/api/providers/verify-npi/?prescribing=1", {"npi_number": "1234567893"}, format="json",
        )
        self.assertEqual(response.data["prescribing"]["can_prescribe"], True)
        check.assert_called_once_with("1234567893")
