"""Tests for the fixed-window rate limiter and its admin endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from telehealth_backend.core import ratelimit
from telehealth_backend.core.exceptions import RateLimitExceeded
from telehealth_backend.core.models import RateLimit
from telehealth_backend.core.tests.helpers import client_for, make_user


class CheckAndIncrementTest(TestCase):
    databases = {"default"}

    def test_first_call_opens_window(self):
        result = ratelimit.check_and_increment("k", max_requests=3, window_seconds=60)
        self.assertTrue(result.allowed)
        self.assertEqual(result.remaining, 2)
        self.assertEqual(RateLimit.objects.get(key="k").count, 1)

    def test_blocks_at_limit(self):
        for expected_remaining in (2, 1, 0):
            result = ratelimit.check_and_increment("k", max_requests=3, window_seconds=60)
            self.assertTrue(result.allowed)
            self.assertEqual(result.remaining, expected_remaining)

        blocked = ratelimit.check_and_increment("k", max_requests=3, window_seconds=60)
        self.assertFalse(blocked.allowed)
        self.assertEqual(blocked.remaining, 0)
        self.assertGreater(blocked.retry_after_ms, 0)
        # rejected calls are not counted
        self.assertEqual(RateLimit.objects.get(key="k").count, 3)

    def test_lapsed_window_restarts(self):
        start = timezone.now() - timedelta(seconds=120)
        RateLimit.objects.create(key="k", count=3, window_start=start, window_seconds=60)

        result = ratelimit.check_and_increment("k", max_requests=3, window_seconds=60)
        self.assertTrue(result.allowed)
        self.assertEqual(result.remaining, 2)
        row = RateLimit.objects.get(key="k")
        self.assertEqual(row.count, 1)
        self.assertGreater(row.window_start, start)

    def test_window_still_active_on_boundary(self):
        now = timezone.now()
        RateLimit.objects.create(key="k", count=3, window_start=now - timedelta(seconds=60), window_seconds=60)
        result = ratelimit.check_and_increment("k", max_requests=3, window_seconds=60, now=now)
        self.assertFalse(result.allowed)

    def test_peek_does_not_count(self):
        ratelimit.check_and_increment("k", max_requests=5, window_seconds=60)
        status = ratelimit.peek("k", max_requests=5)
        self.assertFalse(status.limited)
        self.assertEqual(status.remaining, 4)
        self.assertEqual(RateLimit.objects.get(key="k").count, 1)

    def test_peek_unknown_key(self):
        status = ratelimit.peek("nothing", max_requests=5)
        self.assertEqual(status.to_dict(), {"limited": False, "remaining": 5, "reset_at": None})

    def test_reset(self):
        ratelimit.check_and_increment("k", max_requests=5, window_seconds=60)
        self.assertTrue(ratelimit.reset("k"))
        self.assertFalse(ratelimit.reset("k"))

    def test_enforce_raises(self):
        ratelimit.enforce("k", max_requests=1, window_seconds=60)
        with self.assertRaises(RateLimitExceeded) as ctx:
            ratelimit.enforce("k", max_requests=1, window_seconds=60)
        self.assertEqual(ctx.exception.status_code, 429)


class RateLimitAdminEndpointTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.admin = make_user("rl_admin", "admin")
        self.nurse = make_user("rl_nurse", "nurse")

    def test_status_and_reset(self):
        ratelimit.check_and_increment("assistant_chat:user:1", max_requests=20, window_seconds=60)
        client = client_for(self.admin)

        response = client.get("/api/admin/rate-limits/", {"key": "assistant_chat:user:1", "max": "20"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["remaining"], 19)

        response = client.post("/api/admin/rate-limits/reset/", {"key": "assistant_chat:user:1"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["reset"])
        self.assertFalse(RateLimit.objects.exists())

    def test_status_requires_key(self):
        response = client_for(self.admin).get("/api/admin/rate-limits/")
        self.assertEqual(response.status_code, 400)

    def test_forbidden_for_non_admin(self):
        response = client_for(self.nurse).get("/api/admin/rate-limits/", {"key": "x"})
        self.assertEqual(response.status_code, 403)
