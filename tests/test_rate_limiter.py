"""
Rate limiting.

Covers:
  - fixed window anchored at the first request
  - blocked requests still count toward the window
  - separate identifiers do not share a budget
  - purge_expired drops finished windows
  - client IP resolution from proxy headers
  - 429 with Retry-After through a real endpoint
  - routes sharing a profile share one bucket per client
  - the app-wide ceiling and the on/off switch
"""
from unittest.mock import patch

import pytest
from starlette.requests import Request

from app.config import settings
from app.core.rate_limiter import (
    RATE_LIMIT_PROFILES,
    FixedWindowRateLimiter,
    RateLimitProfile,
    get_client_ip,
    limiter,
    rate_limit,
)


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


PROFILE = RateLimitProfile(window_seconds=60, max_requests=3, message="slow down")


def _request(headers: dict, client=("10.0.0.9", 1234)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": client,
    }
    return Request(scope)


class TestFixedWindow:
    def test_allows_up_to_limit(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)

        results = [limiter.hit("ip", PROFILE) for _ in range(3)]

        assert all(r.success for r in results)
        assert [r.remaining for r in results] == [2, 1, 0]
        assert results[0].reset_at == clock.now + 60

    def test_blocks_after_limit(self):
        limiter = FixedWindowRateLimiter(clock=FakeClock())
        for _ in range(3):
            limiter.hit("ip", PROFILE)

        result = limiter.hit("ip", PROFILE)
        assert result.success is False
        assert result.remaining == 0
        assert result.limit == 3

    def test_window_is_anchored_to_first_request(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)
        first = limiter.hit("ip", PROFILE)

        clock.advance(59)
        later = limiter.hit("ip", PROFILE)

        assert later.reset_at == first.reset_at

    def test_new_window_after_reset_time(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)
        for _ in range(4):
            limiter.hit("ip", PROFILE)

        clock.advance(61)
        result = limiter.hit("ip", PROFILE)
        assert result.success is True
        assert result.remaining == 2

    def test_blocked_requests_still_count(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)
        for _ in range(10):
            limiter.hit("ip", PROFILE)

        clock.advance(30)
        assert limiter.hit("ip", PROFILE).success is False

    def test_identifiers_are_independent(self):
        limiter = FixedWindowRateLimiter(clock=FakeClock())
        for _ in range(3):
            limiter.hit("a", PROFILE)

        assert limiter.hit("a", PROFILE).success is False
        assert limiter.hit("b", PROFILE).success is True

    def test_purge_expired(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock, cleanup_interval=10_000)
        limiter.hit("old", PROFILE)
        clock.advance(120)
        limiter.hit("fresh", PROFILE)

        assert len(limiter) == 2
        assert limiter.purge_expired() == 1
        assert len(limiter) == 1

    def test_periodic_cleanup_runs_on_hit(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock, cleanup_interval=60)
        limiter.hit("old", PROFILE)
        clock.advance(120)
        limiter.hit("fresh", PROFILE)

        assert len(limiter) == 1


class TestProfiles:
    def test_known_profiles(self):
        assert RATE_LIMIT_PROFILES["auth"].max_requests == 5
        assert RATE_LIMIT_PROFILES["auth"].window_seconds == 15 * 60
        assert RATE_LIMIT_PROFILES["api"].max_requests == 60
        assert RATE_LIMIT_PROFILES["sensitive"].max_requests == 10
        assert RATE_LIMIT_PROFILES["contact"].max_requests == 5

    def test_unknown_profile_fails_fast(self):
        with pytest.raises(KeyError):
            rate_limit("nope")


class TestClientIp:
    def test_first_forwarded_for_entry(self):
        request = _request({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})
        assert get_client_ip(request) == "203.0.113.5"

    def test_real_ip_header(self):
        request = _request({"X-Real-IP": " 198.51.100.7 "})
        assert get_client_ip(request) == "198.51.100.7"

    def test_falls_back_to_peer(self):
        assert get_client_ip(_request({})) == "10.0.0.9"

    def test_unknown_without_any_source(self):
        assert get_client_ip(_request({}, client=None)) == "unknown"


class TestEndpointLimit:
    BODY = {
        "name": "Priya",
        "email": "priya@example.com",
        "message": "I would like to know more about your services.",
    }

    def test_contact_form_limited_after_five(self, client):
        for _ in range(5):
            response = client.post("/contact", json=self.BODY)
            assert response.status_code == 201

        blocked = client.post("/contact", json=self.BODY)
        assert blocked.status_code == 429
        assert int(blocked.headers["Retry-After"]) > 0
        assert "X-RateLimit-Reset" in blocked.headers

    def test_success_carries_rate_limit_headers(self, client):
        response = client.post("/contact", json=self.BODY)
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "4"

    def test_clients_are_limited_separately(self, client):
        for _ in range(6):
            client.post("/contact", json=self.BODY, headers={"X-Forwarded-For": "1.1.1.1"})

        response = client.post("/contact", json=self.BODY, headers={"X-Forwarded-For": "2.2.2.2"})
        assert response.status_code == 201


class TestSharedBuckets:
    CONTACT = TestEndpointLimit.BODY

    def test_newsletter_and_contact_share_a_bucket(self, client):
        for i in range(5):
            response = client.post("/newsletter/subscribe", json={"email": f"reader{i}@example.com"})
            assert response.status_code == 200

        blocked = client.post("/contact", json=self.CONTACT)
        assert blocked.status_code == 429
        assert blocked.json() == {"detail": RATE_LIMIT_PROFILES["contact"].message}

    def test_login_and_forgot_password_share_a_bucket(self, client):
        for _ in range(5):
            client.post("/auth/login", json={"email": "nobody@example.com", "password": "wrong-password"})

        blocked = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})
        assert blocked.status_code == 429
        assert blocked.json() == {"detail": RATE_LIMIT_PROFILES["auth"].message}
        assert 0 < int(blocked.headers["Retry-After"]) <= 15 * 60

    def test_other_profiles_are_unaffected(self, client):
        for _ in range(6):
            client.post("/contact", json=self.CONTACT)

        response = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 200


class TestGlobalCeiling:
    def test_two_hundred_per_minute(self, client):
        for _ in range(200):
            assert client.get("/health").status_code == 200
        assert client.get("/health").status_code == 429


class TestDisabled:
    def test_limiter_follows_setting(self):
        assert limiter.enabled == settings.rate_limit_enabled

    def test_per_route_profiles_off(self, client):
        with patch.object(settings, "rate_limit_enabled", False):
            statuses = [client.post("/contact", json=TestEndpointLimit.BODY).status_code for _ in range(7)]
        assert statuses == [201] * 7

    def test_global_ceiling_off(self, client):
        with patch.object(limiter, "enabled", False):
            statuses = {client.get("/health").status_code for _ in range(201)}
        assert statuses == {200}
