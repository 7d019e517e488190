"""Webhook de pagamentos do Mercado Pago.

Endpoint:
- POST /notificacao-pagamento

Segurança:
- Validação HMAC de x-signature (exceto sem MP_WEBHOOK_SECRET)
- 401 apenas em falha de assinatura; qualquer outro caso responde 200
  para que o gateway não reenvie notificações que nunca vão funcionar
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from api.connectors.mercadopago.webhook import (
    InvalidSignatureError,
    NotificationDecodeError,
    authenticate_payment_webhook,
    decode_notification,
)
from api.routes.dependencies import get_container
from app.domain.payment import IgnoredNotification
from app.infra.payments import PaymentDecodeError
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

ACK = "Notificação recebida"


def _ack() -> Response:
    return Response(status_code=status.HTTP_200_OK, content=ACK, media_type="text/plain")


async def _json_body(request: Request) -> dict[str, Any] | None:
    raw = await request.body()
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


@router.post("/notificacao-pagamento")
async def payment_notification(request: Request) -> Response:
    """Recebe notificação do Mercado Pago e reconcilia o pedido."""
    container = get_container(request)
    query = dict(request.query_params)

    try:
        authenticate_payment_webhook(
            query,
            request.headers,
            container.config.mercadopago.webhook_secret,
        )
    except InvalidSignatureError as exc:
        logger.warning(
            "payment_webhook_rejected",
            extra={"reason": str(exc)},
        )
        return Response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content="Invalid signature",
            media_type="text/plain",
        )

    try:
        notification = decode_notification(query, await _json_body(request))
    except NotificationDecodeError as exc:
        logger.warning("payment_notification_invalid", extra={"reason": str(exc)})
        return _ack()

    if isinstance(notification, IgnoredNotification):
        logger.info("payment_notification_ignored", extra={"topic": notification.topic})
        return _ack()

    try:
        outcome = await container.reconcile_payment.execute(notification)
    except (InfrastructureError, PaymentDecodeError) as exc:
        logger.error(
            "payment_reconciliation_failed",
            extra={"payment_id": notification.payment_id, "error_type": type(exc).__name__},
        )
        return _ack()
    except Exception as exc:
        logger.exception(
            "payment_reconciliation_unexpected_error",
            extra={"payment_id": notification.payment_id, "error_type": type(exc).__name__},
        )
        return _ack()

    logger.info(
        "payment_webhook_processed",
        extra={
            "payment_id": notification.payment_id,
            "order_id": outcome.order_id,
            "outcome": outcome.kind.value,
        },
    )
    return _ack()
