"""correlation_id por requisição.

Definido pelo middleware HTTP a partir de `x-correlation-id` (ou
`x-request-id`, enviado pelo Mercado Pago nos webhooks) e injetado em
todos os logs pelo CorrelationIdFilter.

Uso:
    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

CORRELATION_HEADERS: tuple[str, ...] = ("x-correlation-id", "x-request-id")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def correlation_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """Primeiro header de correlação presente, limitado a 128 caracteres."""
    for name in CORRELATION_HEADERS:
        value = (headers.get(name) or "").strip()
        if value:
            return value[:128]
    return None
