"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (checkout, webhooks, cron, consulta, health)
- Validação inicial de request (headers, query params, corpo)
- Delegação para connectors/use_cases
- Respostas HTTP apropriadas

Estrutura:
- routes/checkout/: preferência de pagamento e cotação de frete
- routes/webhooks/: Mercado Pago e Melhor Envio
- routes/orders/: expiração e consulta de pedidos
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.errors import register_exception_handlers
from api.routes.router import create_api_router

__all__ = ["create_api_router", "register_exception_handlers"]
