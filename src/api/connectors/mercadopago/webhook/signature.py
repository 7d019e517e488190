"""Verificação do header x-signature do Mercado Pago.

Formato do header: `ts=<timestamp>,v1=<hmac-hex>`
Manifest assinado: `id:<payment-id>;request-id:<x-request-id>;ts:<ts>;`
O id é usado em minúsculas (o Mercado Pago assina ids alfanuméricos assim).
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from api.connectors.signature import SignatureResult, digests_match

logger = logging.getLogger(__name__)


def build_manifest(payment_id: str, request_id: str, ts: str) -> str:
    return f"id:{payment_id.lower()};request-id:{request_id};ts:{ts};"


def _parse_signature_header(header: str) -> tuple[str, str] | None:
    """Extrai (ts, v1) do header; None se faltar alguma parte."""
    parts: dict[str, str] = {}
    for chunk in header.split(","):
        key, sep, value = chunk.strip().partition("=")
        if sep and key.strip() and value.strip():
            parts[key.strip()] = value.strip()
    ts = parts.get("ts")
    v1 = parts.get("v1")
    if not ts or not v1:
        return None
    return ts, v1


def verify_payment_signature(
    signature_header: str | None,
    request_id: str | None,
    payment_id: str | None,
    secret: str | None,
) -> SignatureResult:
    """Valida a assinatura de uma notificação de pagamento.

    Args:
        signature_header: Valor de x-signature
        request_id: Valor de x-request-id
        payment_id: data.id (ou id) da query string
        secret: Secret do webhook; vazio desativa a verificação

    Returns:
        SignatureResult (sem exceções)
    """
    if not secret:
        logger.warning(
            "payment_signature_check_disabled",
            extra={"reason": "MP_WEBHOOK_SECRET não configurado"},
        )
        return SignatureResult.skip()

    if not signature_header:
        return SignatureResult.fail("missing_signature")
    if not request_id:
        return SignatureResult.fail("missing_request_id")

    parsed = _parse_signature_header(signature_header)
    if parsed is None:
        return SignatureResult.fail("malformed_signature")
    ts, received = parsed

    if not payment_id:
        return SignatureResult.fail("missing_payment_id")

    manifest = build_manifest(payment_id, request_id, ts)
    expected = hmac.new(secret.encode(), manifest.encode(), hashlib.sha256).hexdigest()
    if not digests_match(expected, received.lower()):
        return SignatureResult.fail("signature_mismatch")
    return SignatureResult.ok()
