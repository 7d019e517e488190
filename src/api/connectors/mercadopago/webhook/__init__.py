"""Webhook Mercado Pago: assinatura e decodificação segura."""

from api.connectors.signature import SignatureResult

from .receive import (
    InvalidSignatureError,
    NotificationDecodeError,
    WebhookRequestError,
    authenticate_payment_webhook,
    decode_notification,
    payment_id_from_query,
)
from .signature import build_manifest, verify_payment_signature

__all__ = [
    "InvalidSignatureError",
    "NotificationDecodeError",
    "SignatureResult",
    "WebhookRequestError",
    "authenticate_payment_webhook",
    "build_manifest",
    "decode_notification",
    "payment_id_from_query",
    "verify_payment_signature",
]
