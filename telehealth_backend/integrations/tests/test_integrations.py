"""Tests for outbound integrations; ``requests`` is always mocked."""

from __future__ import annotations

from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from telehealth_backend.core.exceptions import IntegrationError, IntegrationNotConfigured
from telehealth_backend.integrations import client, emailit, fax, llm, npi_registry, video_rooms


def fake_response(status_code=200, payload=None, text=""):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload if payload is not None else {}
    return resp


REQUEST = "telehealth_backend.integrations.client.requests.request"


class ClientTest(SimpleTestCase):
    @mock.patch(REQUEST)
    def test_non_2xx_raises(self, request):
        request.return_value = fake_response(500, text="oops")
        with self.assertRaises(IntegrationError) as ctx:
            client.send("svc", "GET", "https://x")
        self.assertEqual(ctx.exception.message, "svc API error: 500")
        self.assertEqual(ctx.exception.status_code, 502)

    @mock.patch(REQUEST, side_effect=requests.exceptions.Timeout())
    def test_timeout(self, request):
        with self.assertRaises(IntegrationError) as ctx:
            client.send("svc", "GET", "https://x")
        self.assertIn("timed out", ctx.exception.message)

    @mock.patch(REQUEST)
    def test_invalid_json(self, request):
        request.return_value = fake_response(200, ValueError("bad"))
        with self.assertRaises(IntegrationError):
            client.send_json("svc", "GET", "https://x")

    @override_settings(HTTP_TIMEOUT_SECONDS=7)
    @mock.patch(REQUEST)
    def test_default_timeout(self, request):
        request.return_value = fake_response(200, {"a": 1})
        self.assertEqual(client.send_json("svc", "GET", "https://x"), {"a": 1})
        self.assertEqual(request.call_args.kwargs["timeout"], 7)


NPI_RECORD = {
    "results": [
        {
            "number": 1234567893,
            "basic": {"first_name": "JANE", "last_name": "HART", "credential": "MD", "status": "A"},
            "taxonomies": [
                {"code": "207Q00000X", "desc": "Family Medicine", "state": "FL", "primary": True},
            ],
            "addresses": [
                {
                    "address_purpose": "LOCATION",
                    "address_1": "1 Main St",
                    "city": "MIAMI",
                    "state": "FL",
                    "postal_code": "331010000",
                    "telephone_number": "305-555-0100",
                },
            ],
        }
    ]
}


class NpiRegistryTest(SimpleTestCase):
    def test_rejects_short_number_without_calling(self):
        with mock.patch(REQUEST) as request:
            result = npi_registry.verify_npi("12345")
        request.assert_not_called()
        self.assertFalse(result.verified)
        self.assertEqual(result.issues, ["NPI numbers must be exactly 10 digits"])

    @mock.patch(REQUEST)
    def test_verified_record(self, request):
        request.return_value = fake_response(200, NPI_RECORD)
        result = npi_registry.verify_npi("123-456-7893", expected_first_name="Jane", expected_last_name="Hart")
        self.assertTrue(result.verified)
        self.assertEqual(result.npi_number, "1234567893")
        self.assertEqual(result.taxonomy, "207Q00000X")
        self.assertEqual(result.state, "FL")
        self.assertEqual(result.address, "1 Main St, MIAMI, FL 331010000")

    @mock.patch(REQUEST)
    def test_name_mismatch_and_inactive(self, request):
        payload = {"results": [dict(NPI_RECORD["results"][0], basic={
            "first_name": "JANE", "last_name": "HART", "status": "D", "deactivation_date": "2020-01-01",
        })]}
        request.return_value = fake_response(200, payload)
        result = npi_registry.verify_npi("1234567893", expected_last_name="Smith")
        self.assertFalse(result.verified)
        self.assertEqual(len(result.issues), 3)

    @mock.patch(REQUEST)
    def test_not_found(self, request):
        request.return_value = fake_response(200, {"results": []})
        result = npi_registry.verify_npi("1234567893")
        self.assertEqual(result.issues, ["NPI number not found in the national registry"])

    @mock.patch(REQUEST)
    def test_registry_down_is_reported_not_raised(self, request):
        request.return_value = fake_response(503)
        result = npi_registry.verify_npi("1234567893")
        self.assertFalse(result.verified)
        self.assertEqual(result.issues, ["npi_registry API error: 503"])

    @mock.patch(REQUEST)
    def test_prescribing_authority(self, request):
        request.return_value = fake_response(200, NPI_RECORD)
        outcome = npi_registry.check_prescribing_authority("1234567893")
        self.assertTrue(outcome["can_prescribe"])

    @mock.patch(REQUEST)
    def test_search_pharmacies(self, request):
        request.return_value = fake_response(200, {"results": [{
            "number": 1111111111,
            "basic": {"organization_name": "CORNER PHARMACY"},
            "addresses": [{"address_1": "5 Elm", "city": "TAMPA", "state": "FL", "postal_code": "336021234",
                           "telephone_number": "813-555-0000", "fax_number": "813-555-0001"}],
        }]})
        found = npi_registry.search_pharmacies(city="Tampa", state="FL")
        self.assertEqual(found[0]["name"], "CORNER PHARMACY")
        self.assertEqual(found[0]["address"]["zip"], "33602")
        self.assertEqual(request.call_args.kwargs["params"]["enumeration_type"], "NPI-2")


class VideoRoomTest(SimpleTestCase):
    @override_settings(DAILY_API_KEY="")
    def test_placeholder_without_key(self):
        room = video_rooms.create_room(42)
        self.assertEqual(room, {
            "room_url": "https://demo.daily.co/dev-room-42",
            "room_token": "dev-token",
            "is_dev": True,
        })

    @override_settings(DAILY_API_KEY="k", DAILY_API_URL="https://api.daily.co/v1", DAILY_ROOM_PREFIX="consult")
    @mock.patch(REQUEST)
    def test_creates_room_and_token(self, request):
        request.side_effect = [
            fake_response(200, {"url": "https://x.daily.co/consult-42"}),
            fake_response(200, {"token": "tok"}),
        ]
        room = video_rooms.create_room(42)
        self.assertEqual(room["room_url"], "https://x.daily.co/consult-42")
        self.assertEqual(room["room_token"], "tok")
        self.assertFalse(room["is_dev"])
        self.assertEqual(request.call_args_list[0].kwargs["json"]["name"], "consult-42")


class FaxTest(SimpleTestCase):
    @override_settings(PHAXIO_API_KEY="")
    def test_requires_key(self):
        with self.assertRaises(IntegrationNotConfigured):
            fax.send_fax("+15555550100", "doc")

    @override_settings(PHAXIO_API_KEY="k", PHAXIO_API_SECRET="s")
    @mock.patch(REQUEST)
    def test_returns_fax_id(self, request):
        request.return_value = fake_response(200, {"success": True, "data": {"id": 987}})
        self.assertEqual(fax.send_fax("+15555550100", "doc"), "987")
        self.assertEqual(request.call_args.kwargs["auth"], ("k", "s"))

    @override_settings(PHAXIO_API_KEY="k")
    @mock.patch(REQUEST)
    def test_unsuccessful_reply(self, request):
        request.return_value = fake_response(200, {"success": False, "message": "Invalid number"})
        with self.assertRaises(IntegrationError) as ctx:
            fax.send_fax("bad", "doc")
        self.assertEqual(ctx.exception.message, "Invalid number")


class EmailTest(SimpleTestCase):
    @override_settings(EMAILIT_API_KEY="")
    def test_requires_key(self):
        with self.assertRaises(IntegrationNotConfigured):
            emailit.send_email("a@b.com", "s", "t")

    @override_settings(EMAILIT_API_KEY="k", EMAIL_FROM_NAME="Portal", EMAIL_FROM_ADDRESS="no-reply@portal.test")
    @mock.patch(REQUEST)
    def test_sends_payload(self, request):
        request.return_value = fake_response(200, {})
        emailit.send_email("a@b.com", "Subject", "Body")
        payload = request.call_args.kwargs["json"]
        self.assertEqual(payload["from"], "Portal <no-reply@portal.test>")
        self.assertNotIn("html", payload)


class LlmTest(SimpleTestCase):
    @override_settings(LLM_API_KEY="")
    def test_not_configured(self):
        self.assertFalse(llm.is_configured())
        with self.assertRaises(IntegrationNotConfigured) as ctx:
            llm.chat([{"role": "user", "content": "hi"}])
        self.assertEqual(ctx.exception.status_code, 503)

    @override_settings(LLM_API_KEY="k", LLM_BASE_URL="https://llm.test/v1/", LLM_MODEL="m", LLM_MAX_TOKENS=100)
    @mock.patch(REQUEST)
    def test_returns_reply(self, request):
        request.return_value = fake_response(200, {"choices": [{"message": {"content": "  hello  "}}]})
        self.assertEqual(llm.chat([{"role": "user", "content": "hi"}]), "hello")
        self.assertEqual(request.call_args.args[1], "https://llm.test/v1/chat/completions")

    @override_settings(LLM_API_KEY="k")
    @mock.patch(REQUEST)
    def test_unexpected_shape(self, request):
        request.return_value = fake_response(200, {"choices": []})
        with self.assertRaises(IntegrationError):
            llm.chat([{"role": "user", "content": "hi"}])
