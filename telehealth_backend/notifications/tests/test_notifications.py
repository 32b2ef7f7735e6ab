"""Tests for notification bookkeeping and the inbox endpoints."""

from __future__ import annotations

from unittest import mock

from django.test import TestCase

from telehealth_backend.core.exceptions import IntegrationError
from telehealth_backend.core.models import AuditLog
from telehealth_backend.core.tests.helpers import client_for, make_user
from telehealth_backend.notifications import services
from telehealth_backend.notifications.models import Notification


class NotificationServiceTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.patient = make_user("notif_patient", "patient")

    def _create(self, **extra):
        defaults = {
            "recipient_email": " Notif_Patient@Example.com ",
            "type": "rx_ready",
            "subject": "Your prescription is ready",
            "body": "Pick it up today.",
        }
        defaults.update(extra)
        return services.create_notification(**defaults)

    def test_create_links_recipient_user(self):
        notification = self._create()
        self.assertEqual(notification.recipient_email, "notif_patient@example.com")
        self.assertEqual(notification.recipient, self.patient)
        self.assertEqual(notification.status, Notification.STATUS_PENDING)

    def test_mark_failed_keeps_metadata(self):
        notification = self._create(metadata={"rx": 4})
        services.mark_failed(notification, "bounced")
        notification.refresh_from_db()
        self.assertEqual(notification.status, Notification.STATUS_FAILED)
        self.assertEqual(notification.metadata, {"rx": 4, "error": "bounced"})

    def test_mark_read_keeps_first_timestamp(self):
        notification = self._create()
        services.mark_read(notification)
        first = notification.read_at
        services.mark_read(notification)
        self.assertEqual(notification.read_at, first)

    def test_unread_count_and_mark_all(self):
        self._create()
        self._create()
        self.assertEqual(services.unread_count("notif_patient@example.com"), 2)
        self.assertEqual(services.mark_all_read("notif_patient@example.com"), 2)
        self.assertEqual(services.unread_count("notif_patient@example.com"), 0)

    @mock.patch("telehealth_backend.integrations.emailit.send_email")
    def test_deliver_success(self, send_email):
        notification = self._create()
        self.assertTrue(services.deliver(notification))
        send_email.assert_called_once_with(
            "notif_patient@example.com", "Your prescription is ready", "Pick it up today.",
        )
        self.assertEqual(notification.status, Notification.STATUS_SENT)
        self.assertIsNotNone(notification.sent_at)

    @mock.patch("telehealth_backend.integrations.emailit.send_email")
    def test_deliver_failure_is_recorded(self, send_email):
        send_email.side_effect = IntegrationError("emailit", "emailit API error: 500")
        notification = self._create()
        self.assertFalse(services.deliver(notification))
        notification.refresh_from_db()
        self.assertEqual(notification.status, Notification.STATUS_FAILED)
        self.assertEqual(notification.metadata["error"], "emailit API error: 500")

    def test_deliver_in_app_channel_fails(self):
        notification = self._create(channel=Notification.CHANNEL_IN_APP)
        self.assertFalse(services.deliver(notification))
        self.assertEqual(notification.status, Notification.STATUS_FAILED)


class NotificationEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.patient = make_user("inbox_patient", "patient")
        self.other = make_user("inbox_other", "patient")
        self.admin = make_user("inbox_admin", "admin")
        self.mine = services.create_notification(
            recipient_email=self.patient.email, type="rx_ready", subject="Ready",
        )
        services.create_notification(recipient_email=self.other.email, type="rx_ready", subject="Other")

    def test_list_is_scoped_to_own_email(self):
        response = client_for(self.patient).get("/api/notifications/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([n["id"] for n in response.data], [self.mine.id])

    def test_admin_filter_sees_everyone(self):
        response = client_for(self.admin).get("/api/notifications/", {"type": "rx_ready"})
        self.assertEqual(len(response.data), 2)

    def test_patient_cannot_create(self):
        response = client_for(self.patient).post(
            "/api/notifications/",
            {"recipient_email": "x@example.com", "type": "t", "subject": "s"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    @mock.patch("telehealth_backend.integrations.emailit.send_email")
    def test_admin_create_and_deliver(self, send_email):
        response = client_for(self.admin).post(
            "/api/notifications/?deliver=1",
            {"recipient_email": "X@Example.com", "type": "t", "subject": "s", "body": "b"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["recipient_email"], "x@example.com")
        self.assertEqual(response.data["status"], Notification.STATUS_SENT)

    def test_read_flow(self):
        client = client_for(self.patient)
        self.assertEqual(client.get("/api/notifications/unread-count/").data, {"count": 1})

        response = client.post(f"/api/notifications/{self.mine.id}/read/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["is_read"])
        self.assertEqual(client.get("/api/notifications/unread-count/").data, {"count": 0})

    def test_read_all_is_audited(self):
        services.create_notification(recipient_email=self.patient.email, type="rx_sent", subject="Sent")
        client = client_for(self.patient)
        client.post(f"/api/notifications/{self.mine.id}/read/")
        self.assertTrue(AuditLog.objects.filter(action="notification_read", entity_id=str(self.mine.id)).exists())

        response = client.post("/api/notifications/read-all/")
        self.assertEqual(response.data, {"count": 1})
        audit = AuditLog.objects.get(action="notifications_read_all")
        self.assertEqual(audit.changes, {"count": 1})
        self.assertEqual(audit.actor_email, "inbox_patient@example.com")

    def test_cannot_read_someone_elses(self):
        other = Notification.objects.exclude(pk=self.mine.pk).get()
        response = client_for(self.patient).post(f"/api/notifications/{other.id}/read/")
        self.assertEqual(response.status_code, 404)

    def test_mark_failed_requires_delivery_permission(self):
        response = client_for(self.patient).post(
            f"/api/notifications/{self.mine.id}/failed/", {"error": "x"}, format="json",
        )
        self.assertEqual(response.status_code, 403)

        response = client_for(self.admin).post(
            f"/api/notifications/{self.mine.id}/failed/", {"error": "bounced"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["metadata"], {"error": "bounced"})
