"""Endpoints do checkout da loja.

Endpoints:
- POST /criar-preferencia: cria pedido + preferência do Checkout Pro
- POST /calcular-frete: cotação de frete para o CEP de destino
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, status

from api.routes.dependencies import get_container
from api.routes.errors import error_response
from app.domain.checkout import CheckoutRequest, ShippingQuoteRequest
from app.infra.shipping import ShippingQuoteError
from app.services import (
    InvalidPostalCodeError,
    PostalCodeNotFoundError,
    PostalLookupUnavailableError,
)
from app.use_cases.orders import CheckoutError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/criar-preferencia", status_code=status.HTTP_201_CREATED, response_model=None)
async def create_preference(payload: CheckoutRequest, request: Request) -> Any:
    """Persiste o pedido e devolve o link de pagamento."""
    container = get_container(request)
    try:
        session = await container.create_checkout.execute(payload)
    except CheckoutError:
        return error_response(
            "Erro interno ao processar o pedido.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return {"id": session.id, "init_point": session.init_point}


@router.post("/calcular-frete", response_model=None)
async def quote_shipping(payload: ShippingQuoteRequest, request: Request) -> Any:
    container = get_container(request)
    try:
        quote = await container.quote_shipping.execute(payload.postal_code, payload.items)
    except InvalidPostalCodeError:
        return error_response("CEP inválido.", status.HTTP_400_BAD_REQUEST)
    except PostalCodeNotFoundError:
        return error_response("CEP não encontrado.", status.HTTP_400_BAD_REQUEST)
    except PostalLookupUnavailableError:
        return error_response(
            "Serviço de CEP indisponível. Tente novamente em instantes.",
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    except ShippingQuoteError as exc:
        logger.error(
            "shipping_quote_failed",
            extra={"status_code": exc.status_code, "error_type": type(exc).__name__},
        )
        return error_response("Não foi possível calcular o frete.", status.HTTP_502_BAD_GATEWAY)
    return quote.model_dump(mode="json", by_alias=True)
