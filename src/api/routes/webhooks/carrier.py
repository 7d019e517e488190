"""Webhook de rastreio do Melhor Envio.

Endpoint:
- POST /webhook-melhorenvio
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, Response, status

from api.connectors.melhor_envio import authenticate_carrier_webhook, decode_tracking_event
from api.connectors.mercadopago.webhook import InvalidSignatureError, NotificationDecodeError
from api.routes.dependencies import get_container
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

ACK = "Webhook do Melhor Envio processado com sucesso"


def _ack() -> Response:
    return Response(status_code=status.HTTP_200_OK, content=ACK, media_type="text/plain")


@router.post("/webhook-melhorenvio")
async def carrier_webhook(request: Request) -> Response:
    container = get_container(request)
    raw_body = await request.body()

    try:
        authenticate_carrier_webhook(
            raw_body,
            dict(request.headers),
            container.config.melhor_envio.webhook_secret,
        )
    except InvalidSignatureError as exc:
        logger.warning("carrier_webhook_rejected", extra={"reason": str(exc)})
        return Response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content="Invalid signature",
            media_type="text/plain",
        )

    try:
        payload = json.loads(raw_body) if raw_body else {}
    except ValueError:
        logger.warning("carrier_webhook_invalid_json")
        return _ack()
    if not isinstance(payload, dict):
        logger.warning("carrier_webhook_invalid_json")
        return _ack()

    try:
        event = decode_tracking_event(payload)
    except NotificationDecodeError as exc:
        logger.warning("carrier_webhook_invalid", extra={"reason": str(exc)})
        return _ack()

    if event is None:
        logger.info("carrier_webhook_ignored", extra={"event": payload.get("event")})
        return _ack()

    try:
        await container.record_tracking.execute(event)
    except InfrastructureError as exc:
        logger.error(
            "carrier_tracking_failed",
            extra={"shipment_id": event.shipment_id, "error_type": type(exc).__name__},
        )
    except Exception as exc:
        logger.exception(
            "carrier_tracking_unexpected_error",
            extra={"shipment_id": event.shipment_id, "error_type": type(exc).__name__},
        )
    return _ack()
