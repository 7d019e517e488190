"""Testes da varredura de expiração."""

from __future__ import annotations

from datetime import timedelta

import pytest

from app.infra.stores import MemoryOrderStore
from app.services import NotificationDispatcher
from app.use_cases.orders import ExpireOrdersUseCase
from config.settings import EmailSettings
from fsm.states.order import OrderStatus
from fsm.types.transition import StatusTransition
from utils.errors import DatabaseUnavailableError
from tests.fakes.fake_order_services import NOW, FakeMailProvider, make_new_order


@pytest.fixture
def mail() -> FakeMailProvider:
    return FakeMailProvider()


@pytest.fixture
def store() -> MemoryOrderStore:
    return MemoryOrderStore()


@pytest.fixture
def use_case(store: MemoryOrderStore, mail: FakeMailProvider) -> ExpireOrdersUseCase:
    dispatcher = NotificationDispatcher(EmailSettings(from_email="loja@example.com"), [mail])
    return ExpireOrdersUseCase(store, dispatcher)


@pytest.mark.asyncio
async def test_deadline_boundary(store: MemoryOrderStore, use_case: ExpireOrdersUseCase) -> None:
    order = await store.create(make_new_order())

    before = await use_case.execute(now=order.payment_deadline - timedelta(seconds=1))
    exact = await use_case.execute(now=order.payment_deadline)
    after = await use_case.execute(now=order.payment_deadline + timedelta(seconds=1))

    assert before.expired == 0
    assert exact.expired == 0
    assert after.expired_order_ids == (order.id,)


@pytest.mark.asyncio
async def test_unpaid_order_expires_after_61_minutes(
    store: MemoryOrderStore,
    use_case: ExpireOrdersUseCase,
    mail: FakeMailProvider,
) -> None:
    order = await store.create(make_new_order(created_at=NOW))

    result = await use_case.execute(now=NOW + timedelta(minutes=61))

    assert result.scanned == 1
    assert result.expired == 1
    stored = await store.get(order.id)
    assert stored is not None
    assert stored.status is OrderStatus.CANCELLED_EXPIRED
    assert len(mail.sent) == 1
    assert "Pagamento Pendente" in mail.sent[0].subject


@pytest.mark.asyncio
async def test_pending_payment_orders_also_expire(
    store: MemoryOrderStore,
    use_case: ExpireOrdersUseCase,
) -> None:
    order = await store.create(make_new_order())
    await store.apply_transition(
        StatusTransition.to_target(order.id, OrderStatus.PAYMENT_PENDING, "test")
    )

    result = await use_case.execute(now=NOW + timedelta(hours=2))

    assert result.expired_order_ids == (order.id,)


@pytest.mark.asyncio
async def test_paid_orders_are_never_expired(
    store: MemoryOrderStore,
    use_case: ExpireOrdersUseCase,
    mail: FakeMailProvider,
) -> None:
    order = await store.create(make_new_order())
    await store.apply_transition(
        StatusTransition.to_target(order.id, OrderStatus.IN_PRODUCTION, "test")
    )

    result = await use_case.execute(now=NOW + timedelta(days=3))

    assert result.scanned == 0
    assert mail.sent == []


@pytest.mark.asyncio
async def test_second_sweep_is_noop(
    store: MemoryOrderStore,
    use_case: ExpireOrdersUseCase,
    mail: FakeMailProvider,
) -> None:
    await store.create(make_new_order())
    later = NOW + timedelta(hours=2)

    await use_case.execute(now=later)
    second = await use_case.execute(now=later)

    assert second.expired == 0
    assert len(mail.sent) == 1


@pytest.mark.asyncio
async def test_order_paid_between_scan_and_update_is_skipped(
    store: MemoryOrderStore,
    mail: FakeMailProvider,
) -> None:
    order = await store.create(make_new_order())

    class _RacingStore(MemoryOrderStore):
        async def list_overdue(self, statuses, now):  # type: ignore[no-untyped-def]
            candidates = await store.list_overdue(statuses, now)
            await store.apply_transition(
                StatusTransition.to_target(order.id, OrderStatus.IN_PRODUCTION, "payment_webhook")
            )
            return candidates

        async def apply_transition(self, transition, changes=None):  # type: ignore[no-untyped-def]
            return await store.apply_transition(transition, changes)

    dispatcher = NotificationDispatcher(EmailSettings(from_email="loja@example.com"), [mail])
    result = await ExpireOrdersUseCase(_RacingStore(), dispatcher).execute(
        now=NOW + timedelta(hours=2)
    )

    assert result.scanned == 1
    assert result.skipped == 1
    assert result.expired == 0
    assert mail.sent == []


@pytest.mark.asyncio
async def test_email_failure_is_counted(store: MemoryOrderStore, mail: FakeMailProvider) -> None:
    await store.create(make_new_order())
    mail.is_configured = False
    dispatcher = NotificationDispatcher(EmailSettings(from_email="loja@example.com"), [mail])

    result = await ExpireOrdersUseCase(store, dispatcher).execute(now=NOW + timedelta(hours=2))

    assert result.expired == 1
    assert result.email_failures == 1


class _FlakyStore(MemoryOrderStore):
    """Falha o UPDATE de um pedido específico."""

    def __init__(self, failing_id: int) -> None:
        super().__init__()
        self.failing_id = failing_id

    async def apply_transition(self, transition: StatusTransition, changes=None) -> bool:  # type: ignore[no-untyped-def]
        if transition.order_id == self.failing_id:
            raise DatabaseUnavailableError("connection lost")
        return await super().apply_transition(transition, changes)


@pytest.mark.asyncio
async def test_database_failure_on_one_order_does_not_abort_sweep(
    mail: FakeMailProvider,
) -> None:
    store = _FlakyStore(failing_id=1)
    first = await store.create(make_new_order(created_at=NOW))
    second = await store.create(make_new_order(created_at=NOW))
    dispatcher = NotificationDispatcher(EmailSettings(from_email="loja@example.com"), [mail])

    result = await ExpireOrdersUseCase(store, dispatcher).execute(now=NOW + timedelta(minutes=61))

    assert result.scanned == 2
    assert result.store_failures == 1
    assert result.expired_order_ids == (second.id,)
    stored = await store.get(first.id)
    assert stored is not None
    assert stored.status is OrderStatus.AWAITING_PAYMENT
    assert len(mail.sent) == 1
