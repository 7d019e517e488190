"""Reconciliação de notificações de pagamento.

Notificações podem chegar duplicadas, fora de ordem e em paralelo. O
status nunca é lido-e-decidido na aplicação: cada notificação tenta um
UPDATE condicional (status IN predecessores) e apenas quem afeta a linha
dispara os efeitos colaterais.

Fluxo:
    1. Busca o pagamento autoritativo no gateway
    2. Resolve o pedido pela external_reference
    3. approved → IN_PRODUCTION; qualquer outro status → PAYMENT_PENDING
    4. UPDATE condicional; 0 linhas = duplicata (no-op)
    5. Vitória em IN_PRODUCTION: email de confirmação e reserva na transportadora
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.domain.notifications import NotificationType, SideEffectResult
from app.domain.order import OrderChanges
from app.observability import record_latency, record_transition
from app.use_cases.orders._side_effects import run_side_effect
from app.use_cases.orders.outcomes import OutcomeKind, ReconciliationOutcome
from fsm.states.order import OrderStatus
from fsm.types.transition import StatusTransition

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.order import Order
    from app.domain.payment import PaymentNotification, PaymentRecord
    from app.protocols.order_store import OrderStoreProtocol
    from app.protocols.payment_gateway import PaymentGatewayProtocol
    from app.services.carrier_booking import CarrierBookingService
    from app.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

TRIGGER = "payment_webhook"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def classify_payment(payment: PaymentRecord) -> OrderStatus:
    """Status alvo para o status do gateway."""
    if payment.is_approved:
        return OrderStatus.IN_PRODUCTION
    return OrderStatus.PAYMENT_PENDING


class ReconcilePaymentUseCase:
    """Aplica uma notificação de pagamento ao pedido, exatamente uma vez."""

    def __init__(
        self,
        gateway: PaymentGatewayProtocol,
        store: OrderStoreProtocol,
        dispatcher: NotificationDispatcher,
        carrier: CarrierBookingService,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._dispatcher = dispatcher
        self._carrier = carrier
        self._clock = clock

    async def execute(self, notification: PaymentNotification) -> ReconciliationOutcome:
        start = time.perf_counter()
        try:
            return await self._reconcile(notification)
        finally:
            record_latency(TRIGGER, "reconcile", (time.perf_counter() - start) * 1000)

    async def _reconcile(self, notification: PaymentNotification) -> ReconciliationOutcome:
        payment = await self._gateway.get_payment(notification.payment_id)

        order_id = payment.order_id
        if order_id is None:
            logger.info(
                "payment_without_order_reference",
                extra={"payment_id": payment.id, "payment_status": payment.status},
            )
            return ReconciliationOutcome.ignored("missing_external_reference")

        order = await self._store.get(order_id)
        if order is None:
            logger.warning(
                "payment_for_unknown_order",
                extra={"payment_id": payment.id, "order_id": order_id},
            )
            return ReconciliationOutcome.ignored("unknown_order", order_id)

        target = classify_payment(payment)
        transition = StatusTransition.to_target(
            order_id,
            target,
            TRIGGER,
            metadata={"payment_id": payment.id, "payment_status": payment.status},
        )
        applied = await self._store.apply_transition(transition, self._changes_for(payment, target))
        record_transition(TRIGGER, order_id, target.name, applied=applied)

        if not applied:
            return await self._duplicate(order_id, target, payment)

        logger.info("payment_transition_applied", extra=transition.to_log_dict())
        if target is not OrderStatus.IN_PRODUCTION:
            return ReconciliationOutcome(
                kind=OutcomeKind.TRANSITIONED,
                order_id=order_id,
                target_status=target,
            )

        fresh = await self._store.get(order_id) or order
        effects = await self._approved_side_effects(fresh)
        return ReconciliationOutcome(
            kind=OutcomeKind.TRANSITIONED,
            order_id=order_id,
            target_status=target,
            side_effects=effects,
        )

    def _changes_for(self, payment: PaymentRecord, target: OrderStatus) -> OrderChanges:
        if target is OrderStatus.IN_PRODUCTION:
            return OrderChanges(
                gateway_payment_id=payment.id,
                payment_method=payment.payment_method,
                card_last_four=payment.card_last_four,
                paid_at=self._clock(),
            )
        return OrderChanges(gateway_payment_id=payment.id)

    async def _duplicate(
        self,
        order_id: int,
        target: OrderStatus,
        payment: PaymentRecord,
    ) -> ReconciliationOutcome:
        current = await self._store.get(order_id)
        current_status = current.status if current is not None else None

        if target is OrderStatus.IN_PRODUCTION and current_status is OrderStatus.CANCELLED_EXPIRED:
            # Aprovação chegou depois da expiração: exige conferência manual
            logger.warning(
                "late_payment_on_expired_order",
                extra={"order_id": order_id, "payment_id": payment.id},
            )
            reason = "late_payment_on_expired_order"
        else:
            logger.info(
                "payment_webhook_duplicate",
                extra={
                    "order_id": order_id,
                    "target_status": target.name,
                    "current_status": current_status.name if current_status else None,
                },
            )
            reason = "already_applied"
        return ReconciliationOutcome(
            kind=OutcomeKind.DUPLICATE,
            order_id=order_id,
            target_status=target,
            reason=reason,
        )

    async def _approved_side_effects(self, order: Order) -> tuple[SideEffectResult, ...]:
        email = await run_side_effect(
            "email_confirmation",
            order.id,
            self._dispatcher.send(order, NotificationType.CONFIRMATION),
        )
        if order.has_carrier_shipment:
            booking = SideEffectResult.skip("carrier_booking", "already_booked")
        else:
            booking = await run_side_effect("carrier_booking", order.id, self._carrier.book(order))
        return (email, booking)
