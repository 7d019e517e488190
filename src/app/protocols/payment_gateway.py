"""Protocolo do gateway de pagamento.

Evita dependência direta do cliente Mercado Pago nos casos de uso.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.payment import CheckoutSession, PaymentRecord


class PaymentGatewayProtocol(Protocol):
    """Contrato mínimo do gateway de pagamento."""

    async def get_payment(self, payment_id: str) -> PaymentRecord: ...

    async def create_preference(self, body: dict[str, Any]) -> CheckoutSession: ...
