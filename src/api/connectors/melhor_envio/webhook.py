"""Webhook do Melhor Envio: assinatura e evento de rastreio.

Assinatura opcional em X-ME-Signature: base64(HMAC-SHA256(corpo bruto)).
Formatos de corpo aceitos:
    - {"event": "tracking", "resource": {"id": ..., "tracking": ...}}
    - {"event": "order.posted", "data": {"id": ..., "tracking": ...}}
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from typing import Any

from api.connectors.mercadopago.webhook.receive import (
    InvalidSignatureError,
    NotificationDecodeError,
)
from api.connectors.signature import SignatureResult, digests_match
from app.domain.shipping import CarrierTrackingEvent

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-me-signature"
TRACKING_EVENTS = frozenset({"tracking", "order.posted"})


def verify_carrier_signature(
    raw_body: bytes,
    signature_header: str | None,
    secret: str | None,
) -> SignatureResult:
    if not secret:
        return SignatureResult.skip()
    if not signature_header:
        return SignatureResult.fail("missing_signature")
    digest = hmac.new(secret.encode(), raw_body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode()
    if not digests_match(expected, signature_header.strip()):
        return SignatureResult.fail("signature_mismatch")
    return SignatureResult.ok()


def authenticate_carrier_webhook(
    raw_body: bytes,
    headers: dict[str, str],
    secret: str | None,
) -> SignatureResult:
    """Raises InvalidSignatureError quando a assinatura não confere."""
    result = verify_carrier_signature(raw_body, headers.get(SIGNATURE_HEADER), secret)
    if not result.valid:
        raise InvalidSignatureError(result.error or "invalid_signature")
    return result


def decode_tracking_event(payload: dict[str, Any]) -> CarrierTrackingEvent | None:
    """Retorna o evento de rastreio, ou None para eventos de outro tipo.

    Raises:
        NotificationDecodeError: Evento de rastreio sem id de remessa
    """
    event = str(payload.get("event") or "")
    if event not in TRACKING_EVENTS:
        return None
    resource = payload.get("resource") or payload.get("data") or {}
    if not isinstance(resource, dict) or not resource.get("id"):
        raise NotificationDecodeError("missing_shipment_id")
    tracking = resource.get("tracking")
    return CarrierTrackingEvent(
        shipment_id=str(resource["id"]),
        tracking_code=str(tracking).strip() if tracking else None,
        event=event,
    )
