"""Fixtures das rotas HTTP."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tests.fakes.route_harness import RouteHarness, open_harness


@pytest.fixture
def harness() -> Iterator[RouteHarness]:
    with open_harness() as opened:
        yield opened
