"""Endpoints de pedidos.

Endpoints:
- GET /checar-pedidos-expirados: varredura de expiração (cron)
- POST /rastrear-pedido: consulta do pedido pelo cliente

O token do cron é aceito em `?token=` ou no header X-Cron-Token e só é
exigido quando CRON_SECRET estiver configurado.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import APIRouter, Request, status

from api.routes.dependencies import get_container
from api.routes.errors import error_response
from app.domain.checkout import LookupQuery
from app.use_cases.orders import OrderNotFoundError
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

CRON_TOKEN_HEADER = "x-cron-token"
NOT_FOUND_MESSAGE = "Nenhum pedido encontrado para os dados informados."


def _cron_authorized(request: Request, secret: str) -> bool:
    if not secret:
        return True
    token = request.query_params.get("token") or request.headers.get(CRON_TOKEN_HEADER) or ""
    return hmac.compare_digest(token.encode(), secret.encode())


@router.get("/checar-pedidos-expirados", response_model=None)
async def check_expired_orders(request: Request) -> Any:
    container = get_container(request)
    if not _cron_authorized(request, container.config.base.cron_secret):
        logger.warning("expiry_sweep_unauthorized")
        return error_response("Não autorizado.", status.HTTP_401_UNAUTHORIZED)

    try:
        result = await container.expire_orders.execute()
    except InfrastructureError as exc:
        logger.error("expiry_sweep_failed", extra={"error_type": type(exc).__name__})
        return error_response(
            "Erro interno na checagem de pedidos.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return {
        "message": f"Checagem concluída. {result.expired} pedidos atualizados.",
        "scanned": result.scanned,
        "expired": result.expired,
        "skipped": result.skipped,
        "email_failures": result.email_failures,
        "store_failures": result.store_failures,
    }


@router.post("/rastrear-pedido", response_model=None)
async def track_order(payload: LookupQuery, request: Request) -> Any:
    """Retorna o pedido mais recente do cliente (404 uniforme)."""
    container = get_container(request)
    try:
        snapshot = await container.lookup_order.execute(payload)
    except OrderNotFoundError:
        return error_response(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
    except InfrastructureError as exc:
        logger.error("order_lookup_failed", extra={"error_type": type(exc).__name__})
        return error_response(
            "Ocorreu um erro interno. Por favor, tente mais tarde.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return snapshot.model_dump(mode="json", by_alias=True)
