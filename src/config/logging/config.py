"""Configuração do logging do serviço de pedidos.

Um único handler no root logger com JSON (produção) ou texto (testes),
`CorrelationIdFilter` e `PiiRedactionFilter`. Loggers de bibliotecas que
logam URL, SQL ou corpo de requisição ficam em WARNING.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, PiiRedactionFilter
from config.logging.formatters import create_json_formatter, create_text_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "checkout_pedidos"

# httpx loga a URL completa (com CEP); sqlalchemy.engine loga parâmetros
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "uvicorn.access")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    json_output: bool = True,
) -> None:
    """Instala o handler do serviço no root logger.

    Chamada uma vez por `app.bootstrap.initialize_app`. Chamadas
    seguintes substituem o handler anterior.

    Raises:
        ValueError: Nível de log desconhecido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter() if json_output else create_text_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(PiiRedactionFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra que uma fonte secundária respondeu no lugar da primária.

    Ex: `log_fallback(logger, "postal_lookup", reason="viacep_unavailable")`.
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = elapsed_ms

    logger.info("Fallback applied for %s", component, extra=extra)
