"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
monta o `Container` com as implementações concretas.

Uso:
    from app.bootstrap import initialize_app, build_container

    initialize_app()
    container = build_container(load_app_config())
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.container import Container, build_container
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import AppConfig

# Nome do serviço para logs e métricas
SERVICE_NAME = "checkout_pedidos"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes.

    Configura logging em nível DEBUG sem JSON para facilitar debug.
    """
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
        json_output=False,
    )


def validate_runtime_settings(config: AppConfig) -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    environment = config.base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS

    if not config.mercadopago.signature_enabled:
        logger.warning(
            "payment_webhook_signature_disabled",
            extra={"component": "bootstrap", "environment": environment},
        )

    errors = config.validate()
    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


__all__ = [
    "SERVICE_NAME",
    "STRICT_VALIDATION_ENVS",
    "Container",
    "build_container",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
