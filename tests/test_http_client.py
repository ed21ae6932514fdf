"""Tests for thesis_research.fetchers.http.HttpClient."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from thesis_research.errors import HttpError, RateLimitExceeded, RequestTimeout, SchemaValidationError
from thesis_research.fetchers.http import HttpClient
from thesis_research.models.config import RateLimitConfig


def make_client(handler, **kwargs) -> HttpClient:
    return HttpClient("https://api.example.com/v1/", transport=httpx.MockTransport(handler), **kwargs)


async def call(client: HttpClient, method: str = "get", *args):
    try:
        return await getattr(client, method)(*args)
    finally:
        await client.close()


class TestHttpClientGet:
    def test_returns_decoded_json(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = make_client(handler, headers={"X-Api-Key": "secret"})
        data = asyncio.run(call(client, "get", "/quote", {"symbol": "AAPL", "limit": 5, "extended": True}))

        assert data == {"ok": True}
        request = seen[0]
        assert request.url.path == "/v1/quote"
        assert request.url.params["symbol"] == "AAPL"
        assert request.url.params["limit"] == "5"
        assert request.url.params["extended"] == "true"
        assert request.headers["X-Api-Key"] == "secret"

    def test_path_without_leading_slash(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=[])

        asyncio.run(call(make_client(handler), "get", "profile/AAPL"))
        assert seen == ["https://api.example.com/v1/profile/AAPL"]

    def test_non_2xx_raises_http_error_with_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="upstream down")

        with pytest.raises(HttpError) as exc_info:
            asyncio.run(call(make_client(handler), "get", "/quote"))

        err = exc_info.value
        assert err.status == 503
        assert err.status_text == "Service Unavailable"
        assert err.body == "upstream down"
        assert str(err) == "HTTP 503: Service Unavailable"

    def test_timeout_raises_request_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RequestTimeout) as exc_info:
            asyncio.run(call(make_client(handler, timeout=5.0), "get", "/slow"))

        assert not isinstance(exc_info.value, HttpError)
        assert exc_info.value.timeout == 5.0

    def test_invalid_json_raises_schema_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(SchemaValidationError):
            asyncio.run(call(make_client(handler), "get", "/quote"))


class TestHttpClientPost:
    def test_posts_json_body(self):
        seen: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.content)
            return httpx.Response(201, json={"id": 1})

        data = asyncio.run(call(make_client(handler), "post", "/items", {"name": "x"}))
        assert data == {"id": 1}
        assert b'"name"' in seen[0]


class TestHttpClientRateLimit:
    def test_daily_cap_blocks_request_before_sending(self):
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(200, json={})

        client = make_client(handler, rate_limit=RateLimitConfig(requests_per_minute=100, requests_per_day=1))

        async def run():
            try:
                await client.get("/a")
                await client.get("/b")
            finally:
                await client.close()

        with pytest.raises(RateLimitExceeded):
            asyncio.run(run())
        assert len(calls) == 1

    def test_set_rate_limiter(self):
        client = HttpClient("https://api.example.com")
        assert client.rate_limiter is None
        client.set_rate_limiter(RateLimitConfig(requests_per_minute=30))
        assert client.rate_limiter is not None
        assert client.rate_limiter.max_tokens == 30


class TestHttpClientDecoding:
    def test_undecodable_body_raises_schema_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b'{"a": "\xff\xfe"}', headers={"Content-Type": "application/json"})

        with pytest.raises(SchemaValidationError):
            asyncio.run(call(make_client(handler), "get", "/q"))
