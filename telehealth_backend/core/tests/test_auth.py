"""Tests for authentication endpoints.

Tests cover:
- Login (POST /api/auth/login/) and refresh
- Me (GET /api/auth/me/) with capabilities
- Magic-link request/verify, including resend limits and email failures
"""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

from django.test import TestCase, override_settings
from django.utils import timezone

from rest_framework import status

from telehealth_backend.core.exceptions import IntegrationError
from telehealth_backend.core.models import AuditLog, MagicLinkCode, User
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.notifications.models import Notification


class AuthenticationTest(TestCase):
    """Tests for /api/auth/ password and token endpoints."""

    databases = {"default"}

    def setUp(self):
        self.admin = make_user("admin_auth", "admin")
        self.patient = make_user("patient_auth", "patient")
        self.inactive = make_user("inactive_auth", "patient", is_active=False)
        self.client = client_for()

    def test_login_returns_tokens_and_user(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin_auth", "password": "DummyPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["role"]["name"], "admin")
        self.assertIn("audit:view", response.data["user"]["capabilities"])

    def test_login_wrong_password(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin_auth", "password": "nope"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_inactive_user(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "inactive_auth", "password": "DummyPass123!"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh(self):
        login = self.client.post(
            "/api/auth/login/",
            {"username": "patient_auth", "password": "DummyPass123!"},
            format="json",
        )
        response = self.client.post("/api/auth/refresh/", {"refresh": login.data["refresh"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)

    def test_refresh_invalid_token(self):
        response = self.client.post("/api/auth/refresh/", {"refresh": "garbage"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_requires_auth(self):
        response = self.client.get("/api/auth/me/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_lists_capabilities(self):
        response = client_for(self.patient).get("/api/auth/me/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"]["name"], "patient")
        self.assertIn("intake:self", response.data["capabilities"])
        self.assertNotIn("rx:write", response.data["capabilities"])

    def test_health(self):
        response = self.client.get("/api/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})


@mock.patch("telehealth_backend.integrations.emailit.send_email", return_value="msg_1")
class MagicLinkTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.client = client_for()

    def _request(self, email="New.Person@Example.com"):
        return self.client.post("/api/auth/magic-link/request/", {"email": email}, format="json")

    def test_request_creates_account_and_code(self, send_email):
        response = self._request()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])

        user = User.objects.get(email="new.person@example.com")
        self.assertEqual(user.role.name, "patient")
        self.assertFalse(user.has_usable_password())

        code = MagicLinkCode.objects.get(email="new.person@example.com")
        self.assertRegex(code.code, r"^\d{6}$")
        send_email.assert_called_once()
        self.assertIn(code.code, send_email.call_args[0][1])

        notification = Notification.objects.get(recipient_email="new.person@example.com", type="magic_link")
        self.assertEqual(notification.status, Notification.STATUS_SENT)
        audit = AuditLog.objects.get(action="magic_link_requested")
        self.assertEqual(audit.entity_id, str(user.id))
        self.assertEqual(audit.changes, {"delivered": True})

    @override_settings(PORTAL_MAGIC_LINK_EXPIRY=timedelta(minutes=15))
    def test_email_states_configured_expiry(self, send_email):
        self.assertEqual(self._request().status_code, status.HTTP_200_OK)
        text = send_email.call_args[0][2]
        self.assertIn("expires in 15 minutes", text)
        code = MagicLinkCode.objects.get()
        self.assertAlmostEqual(
            (code.expires_at - timezone.now()).total_seconds(), timedelta(minutes=15).total_seconds(), delta=60,
        )

    def test_resend_within_interval_is_rate_limited(self, send_email):
        self.assertEqual(self._request().status_code, status.HTTP_200_OK)
        response = self._request()
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertIn("Retry-After", response)
        self.assertGreater(response.data["retry_after_ms"], 0)

    def test_new_code_consumes_previous(self, send_email):
        self._request()
        first = MagicLinkCode.objects.get()
        MagicLinkCode.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(minutes=2))

        self.assertEqual(self._request().status_code, status.HTTP_200_OK)
        first.refresh_from_db()
        self.assertTrue(first.consumed)
        self.assertEqual(MagicLinkCode.objects.filter(consumed=False).count(), 1)

    def test_verify_issues_tokens_once(self, send_email):
        self._request()
        code = MagicLinkCode.objects.get().code

        response = self.client.post(
            "/api/auth/magic-link/verify/",
            {"email": "new.person@example.com", "code": code},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertIn("access", response.data)
        self.assertTrue(AuditLog.objects.filter(action="magic_link_login").exists())

        again = self.client.post(
            "/api/auth/magic-link/verify/",
            {"email": "new.person@example.com", "code": code},
            format="json",
        )
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(again.data, {"success": False, "error": "Invalid or expired code"})

    def test_verify_expired_code(self, send_email):
        self._request()
        record = MagicLinkCode.objects.get()
        MagicLinkCode.objects.filter(pk=record.pk).update(expires_at=timezone.now() - timedelta(seconds=1))

        response = self.client.post(
            "/api/auth/magic-link/verify/",
            {"email": "new.person@example.com", "code": record.code},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_verify_rejects_malformed_code(self, send_email):
        response = self.client.post(
            "/api/auth/magic-link/verify/",
            {"email": "new.person@example.com", "code": "12ab"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["field"], "code")

    def test_email_failure_answers_502(self, send_email):
        send_email.side_effect = IntegrationError("emailit", "boom")
        response = self._request()
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data, {"success": False, "error": "Email delivery failed"})

        notification = Notification.objects.get(type="magic_link")
        self.assertEqual(notification.status, Notification.STATUS_FAILED)
        self.assertEqual(notification.metadata["error"], "Email delivery failed")
