"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health.router import health_check, readiness_check
from utils.errors import DatabaseUnavailableError


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


def _container_with_store(store: object) -> SimpleNamespace:
    config = SimpleNamespace(base=SimpleNamespace(service_name="pedidos-test"))
    return SimpleNamespace(config=config, store=store)


@pytest.mark.asyncio
async def test_health_reports_service_name() -> None:
    request = _build_request_with_state(SimpleNamespace(container=_container_with_store(None)))

    response = await health_check(request)

    assert response.status == "healthy"
    assert response.service == "pedidos-test"


@pytest.mark.asyncio
async def test_readiness_returns_not_ready_without_container() -> None:
    request = _build_request_with_state(SimpleNamespace(container=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["database"]["error"] == "not_configured"


@pytest.mark.asyncio
async def test_readiness_returns_ready_when_database_answers() -> None:
    store = MagicMock()
    store.ping = AsyncMock(return_value=None)
    request = _build_request_with_state(SimpleNamespace(container=_container_with_store(store)))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["database"]["status"] == "ok"
    store.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_readiness_reports_database_failure() -> None:
    store = MagicMock()
    store.ping = AsyncMock(side_effect=DatabaseUnavailableError("down"))
    request = _build_request_with_state(SimpleNamespace(container=_container_with_store(store)))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["database"]["error"] == "DatabaseUnavailableError"


@pytest.mark.asyncio
async def test_readiness_times_out(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _slow_ping() -> None:
        await asyncio.sleep(10)

    real_wait_for = asyncio.wait_for

    async def _short_wait_for(awaitable, timeout):  # type: ignore[no-untyped-def]
        return await real_wait_for(awaitable, timeout=0.01)

    monkeypatch.setattr("api.routes.health.router.asyncio.wait_for", _short_wait_for)
    store = SimpleNamespace(ping=_slow_ping)
    request = _build_request_with_state(SimpleNamespace(container=_container_with_store(store)))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["database"]["error"] == "timeout"
