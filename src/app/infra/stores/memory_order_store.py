"""Store de pedidos em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Cada método executa leitura e escrita sem `await` intermediário, então
o UPDATE condicional é atômico dentro do event loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.order import NewOrder, Order, OrderChanges
from app.protocols.order_store import OrderStoreProtocol
from fsm.states.order import DEFAULT_INITIAL_STATE

if TYPE_CHECKING:
    from datetime import datetime

    from fsm.states.order import OrderStatus
    from fsm.types.transition import StatusTransition


class MemoryOrderStore(OrderStoreProtocol):
    """Store de pedidos em memória — apenas para dev/test."""

    def __init__(self) -> None:
        self._orders: dict[int, Order] = {}
        self._next_id = 1
        self.update_calls = 0

    async def create(self, new_order: NewOrder) -> Order:
        order = Order(
            id=self._next_id,
            status=DEFAULT_INITIAL_STATE,
            **new_order.model_dump(),
        )
        self._orders[order.id] = order
        self._next_id += 1
        return order

    async def get(self, order_id: int) -> Order | None:
        return self._orders.get(order_id)

    async def find_by_carrier_shipment_id(self, shipment_id: str) -> Order | None:
        for order in self._orders.values():
            if order.carrier_shipment_id == shipment_id:
                return order
        return None

    async def find_latest_by_cpf_and_email(self, cpf: str, email: str) -> Order | None:
        return self._latest(
            lambda order: order.customer_cpf == cpf and _same_email(order, email)
        )

    async def find_latest_by_tracking_and_email(
        self,
        tracking_code: str,
        email: str,
    ) -> Order | None:
        return self._latest(
            lambda order: order.tracking_code == tracking_code and _same_email(order, email)
        )

    async def list_overdue(
        self,
        statuses: frozenset[OrderStatus],
        now: datetime,
    ) -> list[Order]:
        return [
            order
            for order in sorted(self._orders.values(), key=lambda o: o.id)
            if order.status in statuses and order.payment_deadline < now
        ]

    async def apply_transition(
        self,
        transition: StatusTransition,
        changes: OrderChanges | None = None,
    ) -> bool:
        self.update_calls += 1
        order = self._orders.get(transition.order_id)
        if order is None or order.status not in transition.allowed_from:
            return False
        update: dict[str, object] = {"status": transition.to_state}
        if changes is not None:
            update.update(changes.as_dict())
        self._orders[order.id] = order.model_copy(update=update)
        return True

    async def set_carrier_shipment_id(self, order_id: int, shipment_id: str) -> bool:
        order = self._orders.get(order_id)
        if order is None or order.carrier_shipment_id is not None:
            return False
        self._orders[order_id] = order.model_copy(update={"carrier_shipment_id": shipment_id})
        return True

    async def ping(self) -> bool:
        return True

    def _latest(self, predicate) -> Order | None:
        matches = [order for order in self._orders.values() if predicate(order)]
        if not matches:
            return None
        return max(matches, key=lambda o: (o.created_at, o.id))


def _same_email(order: Order, email: str) -> bool:
    return order.customer_email.strip().lower() == email.strip().lower()
