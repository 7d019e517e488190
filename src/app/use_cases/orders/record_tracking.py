"""Registro do código de rastreio vindo da transportadora.

IN_PRODUCTION → SHIPPED com UPDATE condicional; reenvios do mesmo
evento não afetam linha e não reenviam email.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.domain.notifications import NotificationType
from app.domain.order import OrderChanges
from app.observability import record_transition
from app.use_cases.orders._side_effects import run_side_effect
from app.use_cases.orders.outcomes import OutcomeKind, ReconciliationOutcome
from fsm.states.order import OrderStatus
from fsm.types.transition import StatusTransition

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.shipping import CarrierTrackingEvent
    from app.protocols.order_store import OrderStoreProtocol
    from app.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

TRIGGER = "carrier_webhook"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RecordTrackingUseCase:
    def __init__(
        self,
        store: OrderStoreProtocol,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._clock = clock

    async def execute(self, event: CarrierTrackingEvent) -> ReconciliationOutcome:
        if not event.tracking_code:
            logger.info("tracking_event_without_code", extra={"shipment_id": event.shipment_id})
            return ReconciliationOutcome.ignored("missing_tracking_code")

        order = await self._store.find_by_carrier_shipment_id(event.shipment_id)
        if order is None:
            logger.warning("tracking_for_unknown_shipment", extra={"shipment_id": event.shipment_id})
            return ReconciliationOutcome.ignored("unknown_shipment")

        transition = StatusTransition.to_target(
            order.id,
            OrderStatus.SHIPPED,
            TRIGGER,
            metadata={"shipment_id": event.shipment_id},
        )
        changes = OrderChanges(tracking_code=event.tracking_code, shipped_at=self._clock())
        applied = await self._store.apply_transition(transition, changes)
        record_transition(TRIGGER, order.id, transition.to_state.name, applied=applied)

        if not applied:
            logger.info(
                "tracking_webhook_duplicate",
                extra={"order_id": order.id, "current_status": order.status.name},
            )
            return ReconciliationOutcome(
                kind=OutcomeKind.DUPLICATE,
                order_id=order.id,
                target_status=OrderStatus.SHIPPED,
                reason="already_applied",
            )

        logger.info("tracking_transition_applied", extra=transition.to_log_dict())
        fresh = await self._store.get(order.id) or order.model_copy(
            update={"status": OrderStatus.SHIPPED, "tracking_code": event.tracking_code}
        )
        email = await run_side_effect(
            "email_tracking",
            order.id,
            self._dispatcher.send(fresh, NotificationType.TRACKING),
        )
        return ReconciliationOutcome(
            kind=OutcomeKind.TRANSITIONED,
            order_id=order.id,
            target_status=OrderStatus.SHIPPED,
            side_effects=(email,),
        )
