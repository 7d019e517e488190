"""Consulta de pedido pelo próprio cliente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.order import OrderSnapshot

if TYPE_CHECKING:
    from app.domain.checkout import LookupQuery
    from app.protocols.order_store import OrderStoreProtocol

logger = logging.getLogger(__name__)


class OrderNotFoundError(LookupError):
    """Nenhum pedido para a identidade informada (resposta 404 uniforme)."""


class LookupOrderUseCase:
    """Busca o pedido mais recente por (CPF + email) ou (rastreio + email)."""

    def __init__(self, store: OrderStoreProtocol) -> None:
        self._store = store

    async def execute(self, query: LookupQuery) -> OrderSnapshot:
        if query.tracking_code:
            order = await self._store.find_latest_by_tracking_and_email(
                query.tracking_code, query.email
            )
            lookup = "tracking"
        else:
            order = await self._store.find_latest_by_cpf_and_email(query.cpf or "", query.email)
            lookup = "cpf"

        if order is None:
            logger.info("order_lookup_miss", extra={"lookup": lookup})
            raise OrderNotFoundError("order_not_found")

        logger.info("order_lookup_hit", extra={"lookup": lookup, "order_id": order.id})
        return OrderSnapshot.from_order(order)
