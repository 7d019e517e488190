"""Entrypoint do serviço de pedidos.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router, register_exception_handlers
from app.bootstrap import build_container, initialize_app, validate_runtime_settings
from app.observability import (
    correlation_id_from_headers,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from config.settings import AppConfig, load_app_config

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

    from app.bootstrap import Container

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = logging.getLogger(__name__)

CORRELATION_RESPONSE_HEADER = "X-Correlation-Id"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Monta o Container (se não foi injetado) e prepara o schema em dev

    Shutdown:
    - Libera o pool de conexões do banco
    """
    config: AppConfig = app.state.config
    logger.info("app_starting", extra={"environment": config.base.environment})
    validate_runtime_settings(config)

    if getattr(app.state, "container", None) is None:
        app.state.container = build_container(config)
    container: Container = app.state.container
    await container.startup()

    yield

    logger.info("app_shutting_down")
    await container.aclose()


async def _correlation_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_RESPONSE_HEADER] = get_correlation_id()
    finally:
        reset_correlation_id(token)
    return response


def create_app(
    config: AppConfig | None = None,
    container: Container | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        config: Configuração; por padrão lida do ambiente
        container: Dependências já montadas (testes injetam fakes aqui)

    Returns:
        Aplicação FastAPI configurada.
    """
    if config is None:
        config = container.config if container is not None else load_app_config()

    fastapi_app = FastAPI(
        title="checkout-pedidos",
        description="Backend de pedidos: checkout, pagamento, envio e rastreio",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if config.base.is_production else "/docs",
        redoc_url=None,
        openapi_url=None if config.base.is_production else "/openapi.json",
    )
    fastapi_app.state.config = config
    fastapi_app.state.container = container

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.base.cors_origins),
        allow_credentials="*" not in config.base.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    fastapi_app.middleware("http")(_correlation_middleware)

    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"environment": config.base.environment})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting checkout-pedidos in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
