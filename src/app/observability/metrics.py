"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente (Cloud Logging, CloudWatch Insights, etc.).

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Transição: resultado de cada UPDATE condicional de status
- Efeito colateral: sucesso/falha de email e reserva na transportadora

Uso:
    from app.observability.metrics import record_latency, record_transition

    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("payment_webhook", "reconcile", latency_ms)

    record_transition("payment_webhook", order_id, "IN_PRODUCTION", applied=True)
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "payment_webhook", "expiry_sweep")
        operation: Nome da operação (ex: "reconcile", "sweep")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_transition(
    trigger: str,
    order_id: int,
    to_state: str,
    *,
    applied: bool,
) -> None:
    """Registra tentativa de transição de status.

    Args:
        trigger: Gatilho (ex: "payment_webhook", "expiry_sweep", "carrier_webhook")
        order_id: Pedido alvo
        to_state: Nome do status de destino
        applied: True se o UPDATE condicional afetou a linha
    """
    logger.info(
        "metric_transition",
        extra={
            "metric_type": "transition",
            "component": trigger,
            "order_id": order_id,
            "to_state": to_state,
            "applied": applied,
        },
    )


def record_side_effect(
    name: str,
    order_id: int,
    *,
    success: bool,
    skipped: bool = False,
) -> None:
    """Registra resultado de efeito colateral.

    Args:
        name: Efeito (ex: "email_confirmation", "carrier_booking")
        order_id: Pedido relacionado
        success: Resultado do efeito
        skipped: True quando não executado (ex: remessa já reservada)
    """
    logger.info(
        "metric_side_effect",
        extra={
            "metric_type": "side_effect",
            "component": name,
            "order_id": order_id,
            "success": success,
            "skipped": skipped,
        },
    )
