"""Fixtures comuns dos adapters HTTP."""

from __future__ import annotations

import pytest

from app.infra import http


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Remove a espera do backoff e registra as tentativas pausadas."""
    attempts: list[int] = []

    async def _no_sleep(attempt: int, base: float, max_seconds: float) -> None:
        attempts.append(attempt)

    monkeypatch.setattr(http, "_backoff_sleep", _no_sleep)
    return attempts
