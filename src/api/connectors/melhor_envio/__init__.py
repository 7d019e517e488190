"""Conector Melhor Envio (entrada de webhooks)."""

from .webhook import (
    authenticate_carrier_webhook,
    decode_tracking_event,
    verify_carrier_signature,
)

__all__ = [
    "authenticate_carrier_webhook",
    "decode_tracking_event",
    "verify_carrier_signature",
]
