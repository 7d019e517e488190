"""Reserva de envio na transportadora (carrinho do Melhor Envio).

Não deduplica: quem chama verifica antes se o pedido já tem remessa.
O id devolvido é gravado com UPDATE condicional (carrier_shipment_id IS NULL).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from app.domain.notifications import SideEffectResult
from app.domain.order import only_digits
from app.infra.shipping.melhor_envio_client import CarrierBookingError
from app.observability import record_side_effect
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from app.domain.order import Order
    from app.protocols.carrier import CarrierClientProtocol
    from app.protocols.order_store import OrderStoreProtocol
    from config.settings import MelhorEnvioSettings

logger = logging.getLogger(__name__)

EFFECT = "carrier_booking"


def package_weight(order: Order, settings: MelhorEnvioSettings) -> float:
    """Peso do volume: max(peso unitário × quantidade, piso)."""
    package = settings.package
    total = sum(package.unit_weight_kg * item.quantity for item in order.items)
    return round(max(total, package.min_weight_kg), 3)


def build_cart_payload(order: Order, settings: MelhorEnvioSettings) -> dict[str, Any]:
    """Monta o corpo de POST /me/cart para o pedido."""
    package = settings.package
    address = order.address
    subtotal = sum((item.subtotal for item in order.items), Decimal("0"))
    return {
        "service": order.shipping.code,
        "from": settings.sender.as_payload(),
        "to": {
            "name": order.customer_name,
            "phone": only_digits(order.customer_phone),
            "email": order.customer_email,
            "document": only_digits(order.customer_cpf),
            "address": address.street,
            "complement": address.complement,
            "number": address.number,
            "district": address.district,
            "city": address.city,
            "state_abbr": address.state,
            "country_id": "BR",
            "postal_code": only_digits(address.postal_code),
        },
        "products": [
            {
                "name": item.title or item.id,
                "quantity": item.quantity,
                "unitary_value": float(item.unit_price),
            }
            for item in order.items
        ],
        "volumes": [
            {
                "height": package.height_cm,
                "width": package.width_cm,
                "length": package.length_cm,
                "weight": package_weight(order, settings),
            }
        ],
        "options": {
            "insurance_value": max(1.0, float(subtotal)),
            "receipt": False,
            "own_hand": False,
            "reverse": False,
            "non_commercial": True,
            "tags": [{"tag": f"Pedido #{order.id}", "url": None}],
        },
    }


def _redacted(payload: dict[str, Any]) -> dict[str, Any]:
    """Payload sem o bloco do destinatário (PII)."""
    return {key: value for key, value in payload.items() if key != "to"}


class CarrierBookingService:
    """Insere o pedido aprovado no carrinho da transportadora."""

    def __init__(
        self,
        client: CarrierClientProtocol,
        store: OrderStoreProtocol,
        settings: MelhorEnvioSettings,
    ) -> None:
        self._client = client
        self._store = store
        self._settings = settings

    async def book(self, order: Order) -> SideEffectResult:
        payload = build_cart_payload(order, self._settings)
        try:
            shipment_id = await self._client.add_to_cart(payload)
        except CarrierBookingError as exc:
            logger.error(
                "carrier_booking_failed",
                extra={
                    "order_id": order.id,
                    "status_code": exc.status_code,
                    "error": str(exc),
                    "request_payload": _redacted(exc.request_payload or payload),
                    "response_body": exc.response_body,
                },
            )
            record_side_effect(EFFECT, order.id, success=False)
            return SideEffectResult.failed(EFFECT, "carrier_booking_failed", status_code=exc.status_code)

        try:
            stored = await self._store.set_carrier_shipment_id(order.id, shipment_id)
        except InfrastructureError as exc:
            logger.error(
                "carrier_shipment_id_not_saved",
                extra={
                    "order_id": order.id,
                    "shipment_id": shipment_id,
                    "error_type": type(exc).__name__,
                },
            )
            record_side_effect(EFFECT, order.id, success=False)
            return SideEffectResult.failed(EFFECT, "shipment_id_not_saved", shipment_id=shipment_id)

        if not stored:
            logger.warning(
                "carrier_shipment_already_recorded",
                extra={"order_id": order.id, "shipment_id": shipment_id},
            )
        else:
            logger.info(
                "carrier_booking_succeeded",
                extra={"order_id": order.id, "shipment_id": shipment_id},
            )
        record_side_effect(EFFECT, order.id, success=True)
        return SideEffectResult.ok(EFFECT, shipment_id=shipment_id, stored=stored)
