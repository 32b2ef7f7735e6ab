"""Tests for the pharmacy directory endpoints."""

from __future__ import annotations

from unittest import mock

from django.test import TestCase

from telehealth_backend.core.exceptions import IntegrationError
from telehealth_backend.core.models import AuditLog
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.pharmacies.models import Pharmacy


class PharmacyEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.admin = make_user("ph_admin", "admin")
        self.patient = make_user("ph_patient", "patient")
        self.unverified = make_user("ph_nobody", None)
        self.main = Pharmacy.objects.create(name="Main Street Pharmacy", state="FL", tier=1)
        self.other = Pharmacy.objects.create(
            name="Coastal Compounding", state="CA", tier=2, status=Pharmacy.STATUS_INACTIVE,
        )

    def test_list_filters(self):
        client = client_for(self.patient)
        response = client.get("/api/pharmacies/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["name"] for p in response.data], ["Coastal Compounding", "Main Street Pharmacy"])

        response = client.get("/api/pharmacies/", {"state": "fl"})
        self.assertEqual([p["id"] for p in response.data], [self.main.id])

        response = client.get("/api/pharmacies/", {"status": "inactive"})
        self.assertEqual([p["id"] for p in response.data], [self.other.id])

        response = client.get("/api/pharmacies/", {"tier": "abc"})
        self.assertEqual(response.data, [])

    def test_user_without_role_is_forbidden(self):
        response = client_for(self.unverified).get("/api/pharmacies/")
        self.assertEqual(response.status_code, 403)

    def test_patient_cannot_create(self):
        response = client_for(self.patient).post("/api/pharmacies/", {"name": "X"}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_admin_create_validates_and_audits(self):
        client = client_for(self.admin)
        bad = client.post("/api/pharmacies/", {"name": "X", "state": "Florida"}, format="json")
        self.assertEqual(bad.status_code, 400)
        self.assertIn("state", bad.data)

        bad = client.post("/api/pharmacies/", {"name": "X", "npi_number": "12ab"}, format="json")
        self.assertIn("npi_number", bad.data)

        response = client.post(
            "/api/pharmacies/",
            {"name": "Bayside", "state": "tx", "npi_number": "1111111111", "capabilities": ["delivery"]},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["state"], "TX")
        self.assertTrue(AuditLog.objects.filter(action="pharmacy_created", entity_id=str(response.data["id"])).exists())

    def test_admin_partial_update(self):
        response = client_for(self.admin).patch(
            f"/api/pharmacies/{self.main.id}/", {"accepts_e_prescribe": True}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["accepts_e_prescribe"])
        entry = AuditLog.objects.get(action="pharmacy_updated")
        self.assertEqual(entry.changes, {"fields": ["accepts_e_prescribe"]})


class PharmacySearchTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.client = client_for(make_user("search_patient", "patient"))

    def test_requires_a_filter(self):
        response = self.client.get("/api/pharmacies/search/")
        self.assertEqual(response.status_code, 400)

    @mock.patch("telehealth_backend.integrations.npi_registry.search_pharmacies")
    def test_search(self, search):
        search.return_value = [{"npi": "1111111111", "name": "CORNER PHARMACY"}]
        response = self.client.get("/api/pharmacies/search/", {"city": "Tampa", "state": "fl"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        search.assert_called_once_with(name=None, city="Tampa", state="FL", zip_code=None)

    @mock.patch("telehealth_backend.integrations.npi_registry.search_pharmacies")
    def test_registry_failure(self, search):
        search.side_effect = IntegrationError("npi_registry", "npi_registry API error: 503")
        response = self.client.get("/api/pharmacies/search/", {"name": "corner"})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data["service"], "npi_registry")
