"""Observabilidade — logs estruturados, correlation_id, métricas.

Re-exporta funções de correlation_id e métricas para uso em toda a aplicação.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_transition, record_side_effect
"""

from app.observability.correlation import (
    correlation_id_from_headers,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_latency,
    record_side_effect,
    record_transition,
)

__all__ = [
    "correlation_id_from_headers",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_side_effect",
    "record_transition",
    "reset_correlation_id",
    "set_correlation_id",
]
