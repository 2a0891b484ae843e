"""Tests for the fixed-window limiter and its middleware."""

import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from user_service.core.ratelimit import FixedWindowRateLimiter, RateLimitMiddleware


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestFixedWindowRateLimiter(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.limiter = FixedWindowRateLimiter(2, 10, now=self.clock)

    def test_blocks_after_limit(self) -> None:
        self.assertTrue(self.limiter.allow("a"))
        self.assertTrue(self.limiter.allow("a"))
        self.assertFalse(self.limiter.allow("a"))

    def test_keys_are_independent(self) -> None:
        self.limiter.allow("a")
        self.limiter.allow("a")
        self.assertTrue(self.limiter.allow("b"))

    def test_new_window_resets_count(self) -> None:
        self.limiter.allow("a")
        self.limiter.allow("a")
        self.clock.now += 10
        self.assertTrue(self.limiter.allow("a"))

    def test_reset(self) -> None:
        self.limiter.allow("a")
        self.limiter.allow("a")
        self.limiter.reset()
        self.assertTrue(self.limiter.allow("a"))

    def test_closed_windows_are_dropped(self) -> None:
        for i in range(1000):
            self.limiter.allow(f"10.0.{i // 256}.{i % 256}")
        self.assertEqual(len(self.limiter._windows), 1000)
        self.clock.now += 10
        self.assertTrue(self.limiter.allow("fresh"))
        self.assertEqual(list(self.limiter._windows), ["fresh"])

    def test_open_windows_survive_sweep(self) -> None:
        self.limiter.allow("old")
        self.clock.now += 6
        self.limiter.allow("recent")
        self.limiter.allow("recent")
        self.clock.now += 5
        self.assertTrue(self.limiter.allow("other"))
        self.assertNotIn("old", self.limiter._windows)
        self.assertFalse(self.limiter.allow("recent"))


class TestRateLimitMiddleware(unittest.TestCase):
    def setUp(self) -> None:
        self.limiter = FixedWindowRateLimiter(1, 30, now=FakeClock())
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, limiter=self.limiter)

        @app.get("/ping")
        def ping() -> dict[str, str]:
            return {"status": "success"}

        self.client = TestClient(app)

    def test_second_request_rejected(self) -> None:
        self.assertEqual(self.client.get("/ping").status_code, 200)
        res = self.client.get("/ping")
        self.assertEqual(res.status_code, 429)
        self.assertEqual(res.json(), {"status": "error", "message": "too many requests"})
        self.assertEqual(res.headers["Retry-After"], "30")


if __name__ == "__main__":
    unittest.main()
