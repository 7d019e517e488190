"""Agregador de rotas — registra todos os routers do serviço.

Os paths são os mesmos consumidos pelo frontend da loja e cadastrados
nos painéis do Mercado Pago e do Melhor Envio, por isso ficam na raiz.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.checkout.router import router as checkout_router
from api.routes.health.router import router as health_router
from api.routes.orders.router import router as orders_router
from api.routes.webhooks.carrier import router as carrier_webhook_router
from api.routes.webhooks.payment import router as payment_webhook_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (/health e /ready)
    api_router.include_router(health_router, tags=["health"])

    # Checkout
    api_router.include_router(checkout_router, tags=["checkout"])

    # Webhooks
    api_router.include_router(payment_webhook_router, tags=["webhooks"])
    api_router.include_router(carrier_webhook_router, tags=["webhooks"])

    # Pedidos
    api_router.include_router(orders_router, tags=["orders"])

    return api_router
