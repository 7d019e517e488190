"""Filters de logging do serviço de pedidos.

- CorrelationIdFilter: injeta `correlation_id` e `service` em cada record.
- PiiRedactionFilter: mascara dados do cliente (email, CPF, telefone,
  endereço) que chegarem em `extra`, inclusive dentro de dicts aninhados
  como o payload enviado à transportadora.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

# Chaves de `extra` (ou de dicts aninhados) que nunca saem em claro
PII_KEYS = frozenset(
    {
        "email",
        "customer_email",
        "to_email",
        "recipient",
        "recipients",
        "bcc",
        "cpf",
        "customer_cpf",
        "document",
        "phone",
        "customer_phone",
        "telefone",
        "customer_name",
        "address",
        "postal_code",
    }
)

_EMAIL_RE = re.compile(r"[\w.+-]+@([\w-]+\.[\w.-]+)")
# Só CPF formatado; 11 dígitos crus colidiriam com ids de pagamento
_CPF_RE = re.compile(r"\b\d{3}\.\d{3}\.\d{3}-\d{2}\b")

# Atributos padrão de LogRecord; o resto veio de `extra`
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "correlation_id", "service"}


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service; valor explícito em `extra` prevalece."""

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._get_correlation_id()
        record.service = self._service_name
        return True


def mask_email(value: str) -> str:
    """`cliente@example.com` -> `c***@example.com`."""
    return _EMAIL_RE.sub(lambda m: f"{m.group(0)[0]}***@{m.group(1)}", value)


def redact_text(value: str) -> str:
    """Mascara emails e CPFs soltos em mensagens de erro de provedores."""
    return _CPF_RE.sub(REDACTED, mask_email(value))


def redact_value(key: str, value: Any) -> Any:
    if key.lower() in PII_KEYS:
        return REDACTED
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return {k: redact_value(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_value(key, item) for item in value]
    return value


class PiiRedactionFilter(logging.Filter):
    """Mascara PII dos campos extras antes da formatação.

    Não descarta records; só reescreve atributos vindos de `extra`.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in list(record.__dict__.items()):
            if key in _RECORD_ATTRS:
                continue
            record.__dict__[key] = redact_value(key, value)
        return True
