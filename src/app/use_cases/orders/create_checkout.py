"""Criação do pedido e da preferência de pagamento.

O pedido é gravado antes da preferência. Se o gateway falhar, o pedido
fica em AWAITING_PAYMENT e é cancelado depois pela varredura de expiração.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from app.domain.order import DeliveryAddress, NewOrder, compute_total
from app.infra.payments.mercadopago_client import PaymentDecodeError, PaymentGatewayError
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.checkout import CheckoutRequest
    from app.domain.order import Order
    from app.domain.payment import CheckoutSession
    from app.protocols.order_store import OrderStoreProtocol
    from app.protocols.payment_gateway import PaymentGatewayProtocol
    from config.settings import BaseSettings

logger = logging.getLogger(__name__)


class CheckoutError(RuntimeError):
    """Falha ao criar pedido ou preferência (resposta genérica ao cliente)."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _iso(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="milliseconds")


class CreateCheckoutUseCase:
    def __init__(
        self,
        store: OrderStoreProtocol,
        gateway: PaymentGatewayProtocol,
        settings: BaseSettings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._settings = settings
        self._clock = clock

    async def execute(self, request: CheckoutRequest) -> CheckoutSession:
        now = self._clock()
        new_order = self._build_order(request, now)
        try:
            order = await self._store.create(new_order)
        except InfrastructureError as exc:
            logger.error("checkout_order_not_saved", extra={"error_type": type(exc).__name__})
            raise CheckoutError("order_not_saved") from exc

        try:
            session = await self._gateway.create_preference(self._preference_body(order, request))
        except (PaymentGatewayError, PaymentDecodeError) as exc:
            logger.error(
                "checkout_preference_failed",
                extra={"order_id": order.id, "error_type": type(exc).__name__},
            )
            raise CheckoutError("preference_failed") from exc

        logger.info(
            "checkout_created",
            extra={"order_id": order.id, "preference_id": session.id, "total": str(order.total)},
        )
        return session

    def _build_order(self, request: CheckoutRequest, now: datetime) -> NewOrder:
        customer = request.customer
        shipping = request.selected_shipping.model_copy(update={"price": request.shipment_cost})
        return NewOrder(
            customer_name=customer.full_name,
            customer_email=customer.email,
            customer_cpf=customer.cpf,
            customer_phone=customer.phone,
            address=DeliveryAddress(
                street=customer.street,
                number=customer.number,
                complement=customer.complement or "",
                district=customer.district,
                city=customer.city,
                state=customer.state,
                postal_code=customer.postal_code,
            ),
            items=request.items,
            shipping=shipping,
            total=compute_total(request.items, request.shipment_cost),
            created_at=now,
            payment_deadline=now + timedelta(minutes=self._settings.payment_window_minutes),
        )

    def _preference_body(self, order: Order, request: CheckoutRequest) -> dict[str, Any]:
        frontend = self._settings.frontend_url.rstrip("/")
        return {
            "items": [
                {
                    "id": item.id,
                    "title": item.title,
                    "quantity": item.quantity,
                    "unit_price": float(item.unit_price),
                    "currency_id": "BRL",
                    **({"picture_url": item.picture_url} if item.picture_url else {}),
                }
                for item in order.items
            ],
            "payer": {
                "first_name": request.customer.first_name,
                "email": order.customer_email,
            },
            "shipments": {"cost": float(order.shipping.price)},
            "external_reference": str(order.id),
            "notification_url": self._settings.payment_notification_url,
            "back_urls": {
                "success": f"{frontend}/sucesso",
                "failure": f"{frontend}/falha",
                "pending": f"{frontend}/pendente",
            },
            "expires": True,
            "expiration_date_from": _iso(order.created_at),
            "expiration_date_to": _iso(order.payment_deadline),
        }
