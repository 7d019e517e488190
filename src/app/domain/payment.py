"""Modelos de domínio de pagamento (Mercado Pago).

PaymentRecord é a visão autoritativa do pagamento, sempre obtida do
gateway; o corpo do webhook nunca é usado como fonte do status.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

APPROVED_STATUS = "approved"


class PaymentRecord(BaseModel):
    """Pagamento decodificado de GET /v1/payments/{id}."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str = Field(..., min_length=1)
    status_detail: str | None = None
    payment_method: str | None = None
    card_last_four: str | None = None
    external_reference: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED_STATUS

    @property
    def order_id(self) -> int | None:
        """Id do pedido referenciado, ou None se ausente/não numérico."""
        reference = (self.external_reference or "").strip()
        if not (reference.isascii() and reference.isdigit()):
            return None
        return int(reference)


class CheckoutSession(BaseModel):
    """Preferência criada no gateway para redirecionar o cliente."""

    model_config = ConfigDict(extra="ignore")

    id: str
    init_point: str


class PaymentNotification(BaseModel):
    """Notificação de pagamento autenticada (topic=payment)."""

    model_config = ConfigDict(frozen=True)

    topic: Literal["payment"] = "payment"
    payment_id: str = Field(..., min_length=1)


class IgnoredNotification(BaseModel):
    """Notificação de outro tópico (merchant_order, chargebacks...)."""

    model_config = ConfigDict(frozen=True)

    topic: str


GatewayNotification = PaymentNotification | IgnoredNotification
