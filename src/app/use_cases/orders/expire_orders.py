"""Varredura de pedidos com janela de pagamento vencida.

Acionada por cron. Cada candidato passa pelo mesmo UPDATE condicional
das notificações de pagamento; se uma aprovação vencer a corrida, o
pedido é pulado sem email.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.domain.notifications import NotificationType
from app.observability import record_latency, record_transition
from app.use_cases.orders._side_effects import run_side_effect
from app.use_cases.orders.outcomes import ExpirySweepResult
from fsm.states.order import OPEN_PAYMENT_STATES, OrderStatus
from fsm.types.transition import StatusTransition
from utils.errors import DatabaseUnavailableError

if TYPE_CHECKING:
    from app.protocols.order_store import OrderStoreProtocol
    from app.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

TRIGGER = "expiry_sweep"


class ExpireOrdersUseCase:
    """Cancela pedidos cujo payment_deadline ficou para trás."""

    def __init__(
        self,
        store: OrderStoreProtocol,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher

    async def execute(self, now: datetime | None = None) -> ExpirySweepResult:
        start = time.perf_counter()
        now = now or datetime.now(UTC)
        candidates = await self._store.list_overdue(OPEN_PAYMENT_STATES, now)

        expired_ids: list[int] = []
        skipped = 0
        email_failures = 0
        store_failures = 0
        for order in candidates:
            transition = StatusTransition.to_target(
                order.id,
                OrderStatus.CANCELLED_EXPIRED,
                TRIGGER,
            )
            try:
                applied = await self._store.apply_transition(transition)
            except DatabaseUnavailableError as exc:
                # pedido continua aberto e volta na próxima varredura
                store_failures += 1
                logger.error(
                    "expiry_transition_failed",
                    extra={"order_id": order.id, "error_type": type(exc).__name__},
                )
                continue
            record_transition(TRIGGER, order.id, transition.to_state.name, applied=applied)
            if not applied:
                skipped += 1
                logger.info("expiry_skipped_lost_race", extra={"order_id": order.id})
                continue

            expired_ids.append(order.id)
            expired = order.model_copy(update={"status": OrderStatus.CANCELLED_EXPIRED})
            result = await run_side_effect(
                "email_expiry",
                order.id,
                self._dispatcher.send(expired, NotificationType.EXPIRY),
            )
            if not result.success:
                email_failures += 1

        sweep = ExpirySweepResult(
            scanned=len(candidates),
            expired=len(expired_ids),
            skipped=skipped,
            email_failures=email_failures,
            store_failures=store_failures,
            expired_order_ids=tuple(expired_ids),
        )
        logger.info("expiry_sweep_completed", extra=sweep.to_log_dict())
        record_latency(TRIGGER, "sweep", (time.perf_counter() - start) * 1000)
        return sweep
