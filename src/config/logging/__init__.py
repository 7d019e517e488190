"""Logging estruturado do serviço de pedidos.

Campos de todo record: asctime, level, logger, message, correlation_id,
service. Dados do cliente em `extra` saem mascarados (PiiRedactionFilter).
"""

from config.logging.config import configure_logging, log_fallback
from config.logging.filters import CorrelationIdFilter, PiiRedactionFilter, redact_text
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
    create_text_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "PiiRedactionFilter",
    "configure_logging",
    "create_json_formatter",
    "create_text_formatter",
    "log_fallback",
    "redact_text",
]
