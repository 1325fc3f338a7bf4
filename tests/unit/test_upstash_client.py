from __future__ import annotations

import json

import httpx
import pytest

from common.upstash import UpstashApiError, UpstashError, UpstashRedisClient


def test_set_sends_command_array_with_bearer_token():
    calls = {"count": 0, "last_request": None}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        calls["last_request"] = request
        return httpx.Response(200, json={"result": "OK"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with UpstashRedisClient("https://x.upstash.io/", "tok", client=client) as redis:
        result = redis.set("keepalive", "2024-09-05T12:00:00.000Z")

    assert result == "OK"
    assert calls["count"] == 1
    req = calls["last_request"]
    assert req.method == "POST"
    assert req.url.scheme == "https"
    assert req.url.host == "x.upstash.io"
    assert req.url.path == "/"
    assert req.headers["Authorization"] == "Bearer tok"
    assert json.loads(req.content) == ["SET", "keepalive", "2024-09-05T12:00:00.000Z"]


def test_error_payload_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "WRONGPASS invalid password"})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    redis = UpstashRedisClient("https://x.upstash.io", "bad", client=client)
    with pytest.raises(UpstashApiError) as ei:
        redis.set("keepalive", "now")
    assert "WRONGPASS" in str(ei.value)


def test_non_json_error_status_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    redis = UpstashRedisClient("https://x.upstash.io", "tok", client=client)
    with pytest.raises(UpstashApiError) as ei:
        redis.set("keepalive", "now")
    assert "HTTP 502" in str(ei.value)


def test_malformed_body_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["unexpected"])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    redis = UpstashRedisClient("https://x.upstash.io", "tok", client=client)
    with pytest.raises(UpstashApiError):
        redis.set("keepalive", "now")


def test_transport_error_is_wrapped_without_retry():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    redis = UpstashRedisClient("https://x.upstash.io", "tok", client=client)
    with pytest.raises(UpstashError) as ei:
        redis.set("keepalive", "now")
    assert not isinstance(ei.value, UpstashApiError)
    assert calls["count"] == 1


def test_requires_url_and_token():
    with pytest.raises(ValueError):
        UpstashRedisClient("", "tok")
    with pytest.raises(ValueError):
        UpstashRedisClient("https://x.upstash.io", "")


def test_injected_client_is_not_closed():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"result": "OK"})))
    with UpstashRedisClient("https://x.upstash.io", "tok", client=client):
        pass
    assert client.is_closed is False
