"""
Unit tests for the bundled middlewares.

Tests API key checks, CORS headers, login checks and rate limiting.
"""

import json

import pytest
from fastapi import Response
from starlette.authentication import SimpleUser, UnauthenticatedUser

from route_creator.middleware import (
    ApiKeyAuthentication,
    Cors,
    IsUserAuthenticated,
    RateLimiter,
)
from route_creator.middleware.base import as_middleware, queued_response_headers


def body(response: Response) -> dict:
    return json.loads(response.body)


class TestApiKeyAuthentication:
    """Test ApiKeyAuthentication middleware."""

    def test_valid_key_passes_through(self, make_request):
        request = make_request(headers={"X-API-Key": "my-api-key"})

        assert ApiKeyAuthentication(["my-api-key"]).handle(request) is request

    def test_invalid_key_returns_401(self, make_request):
        request = make_request(headers={"X-API-Key": "wrong"})

        response = ApiKeyAuthentication(["my-api-key"]).handle(request)

        assert response.status_code == 401
        assert body(response)["error"]["code"] == "invalid_api_key"
        assert response.headers["WWW-Authenticate"] == "ApiKey"

    def test_missing_header_returns_401(self, make_request):
        response = ApiKeyAuthentication(["my-api-key"]).handle(make_request())

        assert response.status_code == 401

    def test_header_name_is_case_insensitive(self, make_request):
        request = make_request(headers={"x-api-key": "my-api-key"})

        assert ApiKeyAuthentication(["my-api-key"]).handle(request) is request

    def test_custom_header(self, make_request):
        middleware = ApiKeyAuthentication(["k1"], header="X-Client-Key")

        assert middleware.handle(make_request(headers={"X-Client-Key": "k1"})).method == "GET"
        assert middleware.handle(make_request(headers={"X-API-Key": "k1"})).status_code == 401

    def test_empty_allow_list_rejects_everything(self, make_request):
        request = make_request(headers={"X-API-Key": ""})

        assert ApiKeyAuthentication([]).handle(request).status_code == 401


class TestCors:
    """Test Cors middleware."""

    EXPECTED = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
    }

    def test_options_returns_204(self, make_request):
        response = Cors().handle(make_request(method="OPTIONS"))

        assert isinstance(response, Response)
        assert response.status_code == 204
        assert response.body == b""

    def test_other_methods_pass_through_with_headers(self, make_request):
        for method in ("GET", "POST", "PUT", "PATCH", "DELETE"):
            request = make_request(method=method)

            assert Cors().handle(request) is request
            assert queued_response_headers(request) == self.EXPECTED

    def test_preflight_queues_headers(self, make_request):
        request = make_request(method="OPTIONS")

        Cors().handle(request)

        assert queued_response_headers(request) == self.EXPECTED

    def test_custom_origin(self, make_request):
        request = make_request()

        Cors(allow_origin="https://example.com").handle(request)

        headers = queued_response_headers(request)
        assert headers["Access-Control-Allow-Origin"] == "https://example.com"


class TestIsUserAuthenticated:
    """Test IsUserAuthenticated middleware."""

    def test_anonymous_request_returns_401(self, make_request):
        response = IsUserAuthenticated().handle(make_request())

        assert response.status_code == 401
        assert body(response)["error"]["message"] == "User is not authenticated."

    def test_unauthenticated_user_returns_401(self, make_request):
        request = make_request(user=UnauthenticatedUser())

        assert IsUserAuthenticated().handle(request).status_code == 401

    def test_authenticated_user_passes(self, make_request):
        request = make_request(user=SimpleUser("alice"))

        assert IsUserAuthenticated().handle(request) is request

    def test_custom_check(self, make_request):
        middleware = IsUserAuthenticated(
            check=lambda request: request.headers.get("Authorization") == "Bearer ok"
        )

        assert middleware.handle(make_request(headers={"Authorization": "Bearer ok"})).method == "GET"
        assert middleware.handle(make_request()).status_code == 401


class TestRateLimiter:
    """Test RateLimiter middleware."""

    def test_allows_up_to_threshold(self, make_request, store, clock):
        limiter = RateLimiter(3, store=store, clock=clock)

        for _ in range(3):
            request = make_request()
            assert limiter.handle(request) is request

    def test_request_over_threshold_returns_429(self, make_request, store, clock):
        limiter = RateLimiter(3, store=store, clock=clock)
        for _ in range(3):
            limiter.handle(make_request())

        clock.advance(20)
        response = limiter.handle(make_request())

        assert response.status_code == 429
        assert body(response)["error"]["code"] == "rate_limit_exceeded"
        assert response.headers["Retry-After"] == "40"
        assert response.headers["X-RateLimit-Limit"] == "3"

    def test_new_window_resets_count(self, make_request, store, clock):
        limiter = RateLimiter(2, store=store, clock=clock)
        for _ in range(3):
            limiter.handle(make_request())

        clock.advance(60)
        request = make_request()

        assert limiter.handle(request) is request
        assert store.get("rate_limiter:203.0.113.7")["count"] == 1

    def test_window_boundary_uses_window_start(self, make_request, store, clock):
        """Requests inside the window do not extend it."""
        limiter = RateLimiter(2, store=store, clock=clock)
        limiter.handle(make_request())
        clock.advance(59)
        limiter.handle(make_request())

        assert limiter.handle(make_request()).status_code == 429

        clock.advance(1)
        request = make_request()
        assert limiter.handle(request) is request

    def test_addresses_are_counted_separately(self, make_request, store, clock):
        limiter = RateLimiter(1, store=store, clock=clock)
        limiter.handle(make_request(client=("198.51.100.1", 1000)))

        request = make_request(client=("198.51.100.2", 1000))

        assert limiter.handle(request) is request
        assert limiter.handle(make_request(client=("198.51.100.1", 1000))).status_code == 429

    def test_missing_client_uses_unknown_key(self, make_request):
        assert RateLimiter.cache_key(make_request(client=None)) == "rate_limiter:unknown"

    def test_counter_is_stored_with_window_ttl(self, make_request, store, clock):
        limiter = RateLimiter(5, store=store, window=30, clock=clock)
        limiter.handle(make_request())
        limiter.handle(make_request())

        assert store.get("rate_limiter:203.0.113.7") == {"count": 2, "timestamp": clock.now}

        clock.advance(30)
        assert store.get("rate_limiter:203.0.113.7") is None


class TestMiddlewareAdapter:
    """Test as_middleware adaptation of bundled middlewares."""

    def test_bundled_middleware_is_callable(self, make_request):
        request = make_request(headers={"X-API-Key": "k"})
        middleware = as_middleware(ApiKeyAuthentication(["k"]))

        assert middleware(request) is request

    def test_bundled_middleware_class_rejected(self):
        with pytest.raises(TypeError):
            as_middleware(Cors)
