"""Contrato dos stores de pedido (memória e SQLAlchemy/SQLite).

Os mesmos testes rodam contra as duas implementações.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from app.domain.order import OrderChanges
from app.infra.stores import MemoryOrderStore, SqlOrderStore
from fsm.states.order import OPEN_PAYMENT_STATES, OrderStatus
from fsm.types.transition import StatusTransition
from tests.fakes.fake_order_services import NOW, make_new_order

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from app.protocols import OrderStoreProtocol


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request: pytest.FixtureRequest, tmp_path: Path) -> AsyncIterator[OrderStoreProtocol]:
    if request.param == "memory":
        yield MemoryOrderStore()
        return
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pedidos.db'}")
    sql_store = SqlOrderStore(engine)
    await sql_store.create_schema()
    try:
        yield sql_store
    finally:
        await engine.dispose()


def _to(order_id: int, target: OrderStatus) -> StatusTransition:
    return StatusTransition.to_target(order_id, target, "test")


@pytest.mark.asyncio
async def test_create_assigns_id_and_initial_status(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())

    loaded = await store.get(order.id)

    assert loaded is not None
    assert loaded.status is OrderStatus.AWAITING_PAYMENT
    assert str(loaded.total) == "170.00"
    assert loaded.items[0].title == "Camiseta"
    assert loaded.address.postal_code == "01001000"
    assert loaded.created_at == NOW
    assert loaded.payment_deadline == NOW + timedelta(minutes=60)


@pytest.mark.asyncio
async def test_get_unknown_returns_none(store: OrderStoreProtocol) -> None:
    assert await store.get(999) is None


@pytest.mark.asyncio
async def test_conditional_update_applies_once(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())
    changes = OrderChanges(gateway_payment_id="9001", payment_method="pix", paid_at=NOW)

    first = await store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION), changes)
    second = await store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION), changes)

    assert first is True
    assert second is False
    loaded = await store.get(order.id)
    assert loaded is not None
    assert loaded.status is OrderStatus.IN_PRODUCTION
    assert loaded.gateway_payment_id == "9001"
    assert loaded.paid_at == NOW


@pytest.mark.asyncio
async def test_no_regression_from_approved_to_pending(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())
    await store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION))

    applied = await store.apply_transition(_to(order.id, OrderStatus.PAYMENT_PENDING))

    assert applied is False
    loaded = await store.get(order.id)
    assert loaded is not None
    assert loaded.status is OrderStatus.IN_PRODUCTION


@pytest.mark.asyncio
async def test_expired_order_is_terminal_for_payments(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())
    await store.apply_transition(_to(order.id, OrderStatus.CANCELLED_EXPIRED))

    applied = await store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION))

    assert applied is False


@pytest.mark.asyncio
async def test_concurrent_updates_have_single_winner(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())

    results = await asyncio.gather(
        *(store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION)) for _ in range(5))
    )

    assert results.count(True) == 1


@pytest.mark.asyncio
async def test_list_overdue_uses_strict_deadline(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())
    deadline = order.payment_deadline

    at_deadline = await store.list_overdue(OPEN_PAYMENT_STATES, deadline)
    after_deadline = await store.list_overdue(OPEN_PAYMENT_STATES, deadline + timedelta(seconds=1))

    assert at_deadline == []
    assert [o.id for o in after_deadline] == [order.id]


@pytest.mark.asyncio
async def test_list_overdue_skips_paid_orders(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())
    await store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION))

    overdue = await store.list_overdue(OPEN_PAYMENT_STATES, NOW + timedelta(days=1))

    assert overdue == []


@pytest.mark.asyncio
async def test_carrier_shipment_id_is_written_once(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())

    first = await store.set_carrier_shipment_id(order.id, "ship-1")
    second = await store.set_carrier_shipment_id(order.id, "ship-2")

    assert (first, second) == (True, False)
    found = await store.find_by_carrier_shipment_id("ship-1")
    assert found is not None
    assert found.id == order.id
    assert await store.find_by_carrier_shipment_id("ship-2") is None


@pytest.mark.asyncio
async def test_find_latest_by_cpf_and_email(store: OrderStoreProtocol) -> None:
    await store.create(make_new_order(created_at=NOW))
    newest = await store.create(make_new_order(created_at=NOW + timedelta(hours=1)))
    await store.create(make_new_order(email="outra@example.com"))

    found = await store.find_latest_by_cpf_and_email("12345678909", "Cliente@Example.com")

    assert found is not None
    assert found.id == newest.id
    assert await store.find_latest_by_cpf_and_email("00000000000", "cliente@example.com") is None


@pytest.mark.asyncio
async def test_find_latest_by_tracking_and_email(store: OrderStoreProtocol) -> None:
    order = await store.create(make_new_order())
    await store.apply_transition(_to(order.id, OrderStatus.IN_PRODUCTION))
    await store.apply_transition(
        _to(order.id, OrderStatus.SHIPPED),
        OrderChanges(tracking_code="BR123", shipped_at=NOW),
    )

    found = await store.find_latest_by_tracking_and_email("BR123", "cliente@example.com")

    assert found is not None
    assert found.status is OrderStatus.SHIPPED
    assert found.shipped_at == NOW
    assert await store.find_latest_by_tracking_and_email("BR123", "x@example.com") is None


@pytest.mark.asyncio
async def test_ping(store: OrderStoreProtocol) -> None:
    assert await store.ping() is True
