"""Protocolo de persistência de pedidos.

Toda mudança de status é um UPDATE condicional: a implementação deve
devolver True somente quando exatamente uma linha foi afetada. Esse
retorno é o único árbitro de quem executa os efeitos colaterais.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from app.domain.order import NewOrder, Order, OrderChanges
    from fsm.states.order import OrderStatus
    from fsm.types.transition import StatusTransition


class OrderStoreProtocol(ABC):
    """Contrato assíncrono para armazenamento de pedidos."""

    @abstractmethod
    async def create(self, new_order: NewOrder) -> Order: ...

    @abstractmethod
    async def get(self, order_id: int) -> Order | None: ...

    @abstractmethod
    async def find_by_carrier_shipment_id(self, shipment_id: str) -> Order | None: ...

    @abstractmethod
    async def find_latest_by_cpf_and_email(self, cpf: str, email: str) -> Order | None: ...

    @abstractmethod
    async def find_latest_by_tracking_and_email(
        self,
        tracking_code: str,
        email: str,
    ) -> Order | None: ...

    @abstractmethod
    async def list_overdue(
        self,
        statuses: frozenset[OrderStatus],
        now: datetime,
    ) -> list[Order]: ...

    @abstractmethod
    async def apply_transition(
        self,
        transition: StatusTransition,
        changes: OrderChanges | None = None,
    ) -> bool:
        """UPDATE ... WHERE id = :id AND status IN (:allowed_from)."""

    @abstractmethod
    async def set_carrier_shipment_id(self, order_id: int, shipment_id: str) -> bool:
        """UPDATE ... WHERE id = :id AND carrier_shipment_id IS NULL."""

    @abstractmethod
    async def ping(self) -> bool: ...
