"""Integração com o gateway de pagamento."""

from app.infra.payments.mercadopago_client import (
    MercadoPagoClient,
    PaymentDecodeError,
    PaymentGatewayError,
)

__all__ = [
    "MercadoPagoClient",
    "PaymentDecodeError",
    "PaymentGatewayError",
]
