"""Testes do registro de rastreio vindo da transportadora."""

from __future__ import annotations

import pytest

from app.domain.shipping import CarrierTrackingEvent
from app.infra.stores import MemoryOrderStore
from app.services import NotificationDispatcher
from app.use_cases.orders import OutcomeKind, RecordTrackingUseCase
from config.settings import EmailSettings
from fsm.states.order import OrderStatus
from fsm.types.transition import StatusTransition
from tests.fakes.fake_order_services import NOW, FakeMailProvider, make_new_order


async def _paid_order_with_shipment(store: MemoryOrderStore) -> int:
    order = await store.create(make_new_order())
    await store.apply_transition(
        StatusTransition.to_target(order.id, OrderStatus.IN_PRODUCTION, "test")
    )
    await store.set_carrier_shipment_id(order.id, "ship-1")
    return order.id


@pytest.fixture
def mail() -> FakeMailProvider:
    return FakeMailProvider()


@pytest.fixture
def store() -> MemoryOrderStore:
    return MemoryOrderStore()


@pytest.fixture
def use_case(store: MemoryOrderStore, mail: FakeMailProvider) -> RecordTrackingUseCase:
    dispatcher = NotificationDispatcher(EmailSettings(from_email="loja@example.com"), [mail])
    return RecordTrackingUseCase(store, dispatcher, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_tracking_marks_order_shipped_and_emails(
    store: MemoryOrderStore,
    use_case: RecordTrackingUseCase,
    mail: FakeMailProvider,
) -> None:
    order_id = await _paid_order_with_shipment(store)

    outcome = await use_case.execute(CarrierTrackingEvent(shipment_id="ship-1", tracking_code="BR1"))

    assert outcome.kind is OutcomeKind.TRANSITIONED
    stored = await store.get(order_id)
    assert stored is not None
    assert stored.status is OrderStatus.SHIPPED
    assert stored.tracking_code == "BR1"
    assert stored.shipped_at == NOW
    assert len(mail.sent) == 1
    assert "BR1" in mail.sent[0].html


@pytest.mark.asyncio
async def test_repeated_tracking_event_is_duplicate(
    store: MemoryOrderStore,
    use_case: RecordTrackingUseCase,
    mail: FakeMailProvider,
) -> None:
    await _paid_order_with_shipment(store)
    event = CarrierTrackingEvent(shipment_id="ship-1", tracking_code="BR1")

    await use_case.execute(event)
    again = await use_case.execute(event)

    assert again.kind is OutcomeKind.DUPLICATE
    assert len(mail.sent) == 1


@pytest.mark.asyncio
async def test_unknown_shipment_is_ignored(use_case: RecordTrackingUseCase) -> None:
    outcome = await use_case.execute(CarrierTrackingEvent(shipment_id="nope", tracking_code="BR1"))

    assert outcome.kind is OutcomeKind.IGNORED
    assert outcome.reason == "unknown_shipment"


@pytest.mark.asyncio
async def test_event_without_code_is_ignored(
    store: MemoryOrderStore,
    use_case: RecordTrackingUseCase,
) -> None:
    await _paid_order_with_shipment(store)

    outcome = await use_case.execute(CarrierTrackingEvent(shipment_id="ship-1"))

    assert outcome.reason == "missing_tracking_code"
    assert store.update_calls == 1
