"""Cotação de frete para o checkout."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from app.domain.order import only_digits
from app.domain.shipping import ShippingQuote, ShippingService

if TYPE_CHECKING:
    from app.domain.checkout import QuoteItem
    from app.protocols.carrier import CarrierClientProtocol
    from app.services.postal_lookup import PostalLookupService
    from config.settings import MelhorEnvioSettings

logger = logging.getLogger(__name__)


def is_allowed(option: dict[str, Any], allowed: tuple[tuple[str, str], ...]) -> bool:
    """Filtra pela lista (empresa, serviço); serviço vazio aceita toda a empresa."""
    company = (option.get("company") or {}).get("name", "")
    service = option.get("name", "")
    return any(
        company == allowed_company and (not allowed_service or service == allowed_service)
        for allowed_company, allowed_service in allowed
    )


def to_service(option: dict[str, Any]) -> ShippingService | None:
    try:
        price = Decimal(str(option["price"]))
    except (KeyError, InvalidOperation):
        return None
    company = (option.get("company") or {}).get("name", "")
    return ShippingService(
        code=option.get("id"),
        name=f"{company} - {option.get('name', '')}",
        price=price,
        delivery_time=option.get("delivery_time"),
    )


class QuoteShippingUseCase:
    def __init__(
        self,
        postal: PostalLookupService,
        carrier: CarrierClientProtocol,
        settings: MelhorEnvioSettings,
    ) -> None:
        self._postal = postal
        self._carrier = carrier
        self._settings = settings

    async def execute(self, postal_code: str, items: list[QuoteItem]) -> ShippingQuote:
        address = await self._postal.lookup(postal_code)
        options = await self._carrier.calculate(self._payload(address.postal_code, items))

        services: list[ShippingService] = []
        for option in options:
            if option.get("error") or not is_allowed(option, self._settings.allowed_services):
                continue
            service = to_service(option)
            if service is not None:
                services.append(service)

        logger.info(
            "shipping_quoted",
            extra={"options_received": len(options), "options_returned": len(services)},
        )
        return ShippingQuote(services=services, address=address)

    def _payload(self, postal_code: str, items: list[QuoteItem]) -> dict[str, Any]:
        package = self._settings.package
        subtotal = sum((item.unit_price * item.quantity for item in items), Decimal("0"))
        return {
            "from": {"postal_code": only_digits(self._settings.sender.postal_code)},
            "to": {"postal_code": postal_code},
            "products": [
                {
                    "id": item.id,
                    "name": item.title or item.id,
                    "quantity": item.quantity,
                    "unitary_value": float(item.unit_price),
                    "height": package.height_cm,
                    "width": package.width_cm,
                    "length": package.length_cm,
                    "weight": package.unit_weight_kg,
                }
                for item in items
            ],
            "options": {
                "receipt": False,
                "own_hand": False,
                "insurance_value": float(subtotal),
            },
        }
