"""Autenticação e decodificação da notificação de pagamento (sem PII).

A notificação só identifica o pagamento; o status é sempre buscado no
gateway. Query aceita os dois formatos do Mercado Pago:
    - Webhooks: ?type=payment&data.id=123
    - IPN:      ?topic=payment&id=123
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from app.domain.payment import GatewayNotification, IgnoredNotification, PaymentNotification

from .signature import verify_payment_signature

if TYPE_CHECKING:
    from collections.abc import Mapping

    from api.connectors.signature import SignatureResult

_PAYMENT_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
PAYMENT_TOPIC = "payment"


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidSignatureError(WebhookRequestError):
    """Assinatura inválida do webhook."""


class NotificationDecodeError(WebhookRequestError):
    """Notificação fora do formato esperado."""


def payment_id_from_query(query: Mapping[str, str]) -> str | None:
    """data.id tem precedência sobre id."""
    value = query.get("data.id") or query.get("id")
    return value.strip() if value else None


def authenticate_payment_webhook(
    query: Mapping[str, str],
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Valida x-signature/x-request-id contra o id da query.

    Raises:
        InvalidSignatureError: Se a assinatura for inválida
    """
    result = verify_payment_signature(
        signature_header=headers.get("x-signature"),
        request_id=headers.get("x-request-id"),
        payment_id=payment_id_from_query(query),
        secret=secret,
    )
    if not result.valid:
        raise InvalidSignatureError(result.error or "invalid_signature")
    return result


def decode_notification(
    query: Mapping[str, str],
    body: Mapping[str, Any] | None = None,
) -> GatewayNotification:
    """Decodifica a notificação em PaymentNotification ou IgnoredNotification.

    Se a query não trouxer tópico, usa `type`/`data.id` do corpo JSON.

    Raises:
        NotificationDecodeError: Tópico ausente ou id de pagamento inválido
    """
    topic = (query.get("topic") or query.get("type") or "").strip()
    payment_id = payment_id_from_query(query)

    if not topic and body:
        topic = str(body.get("type") or body.get("topic") or "").strip()
        data = body.get("data")
        if payment_id is None and isinstance(data, dict) and data.get("id") is not None:
            payment_id = str(data["id"]).strip()

    if not topic:
        raise NotificationDecodeError("missing_topic")
    if topic != PAYMENT_TOPIC:
        return IgnoredNotification(topic=topic)
    if not payment_id:
        raise NotificationDecodeError("missing_payment_id")
    if not _PAYMENT_ID.match(payment_id):
        raise NotificationDecodeError("invalid_payment_id")
    return PaymentNotification(payment_id=payment_id)
