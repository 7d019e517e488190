"""Testes do HttpClient com retry."""

from __future__ import annotations

import httpx
import pytest

from app.infra.http import HttpClient, HttpClientConfig, HttpError


def _client(handler, max_retries: int = 2) -> HttpClient:  # type: ignore[no-untyped-def]
    return HttpClient(
        HttpClientConfig(max_retries=max_retries, default_headers={"X-Default": "1"}),
        service="test",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_success_returns_response_with_default_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    response = await _client(handler).get("https://example.test/x", headers={"X-Extra": "2"})

    assert response.json() == {"ok": True}
    assert seen[0].headers["X-Default"] == "1"
    assert seen[0].headers["X-Extra"] == "2"


@pytest.mark.asyncio
async def test_retries_5xx_then_succeeds(no_backoff: list[int]) -> None:
    statuses = iter([503, 502, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses))

    response = await _client(handler).get("https://example.test/x")

    assert response.status_code == 200
    assert no_backoff == [0, 1]


@pytest.mark.asyncio
async def test_429_exhausts_retries() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(429)

    with pytest.raises(HttpError) as excinfo:
        await _client(handler, max_retries=1).get("https://example.test/x")

    assert calls == 2
    assert excinfo.value.status_code == 429
    assert excinfo.value.is_retryable is True


@pytest.mark.asyncio
async def test_4xx_is_returned_without_retry() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(404)

    response = await _client(handler).get("https://example.test/x")

    assert response.status_code == 404
    assert calls == 1


@pytest.mark.asyncio
async def test_connection_errors_become_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(HttpError, match="http_connection_error"):
        await _client(handler, max_retries=2).post("https://example.test/x", json={})


@pytest.mark.asyncio
async def test_connection_reset_is_retried(no_backoff: list[int]) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ReadError("connection reset", request=request)
        return httpx.Response(200, json={"ok": True})

    response = await _client(handler).get("https://example.test/x")

    assert response.status_code == 200
    assert calls == 2
    assert no_backoff == [0]


@pytest.mark.parametrize(
    "error",
    [httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError],
)
@pytest.mark.asyncio
async def test_transport_errors_become_http_error(error: type[httpx.TransportError]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error("broken", request=request)

    with pytest.raises(HttpError, match="http_connection_error") as excinfo:
        await _client(handler, max_retries=1).get("https://example.test/x")

    assert excinfo.value.is_retryable is True
