"""Integração com a transportadora (Melhor Envio)."""

from app.infra.shipping.melhor_envio_client import (
    CarrierBookingError,
    MelhorEnvioClient,
    ShippingQuoteError,
)

__all__ = [
    "CarrierBookingError",
    "MelhorEnvioClient",
    "ShippingQuoteError",
]
