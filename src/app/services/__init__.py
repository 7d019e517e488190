"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.carrier_booking import CarrierBookingService, build_cart_payload
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.postal_lookup import (
    InvalidPostalCodeError,
    PostalCodeNotFoundError,
    PostalLookupService,
    PostalLookupUnavailableError,
)

__all__ = [
    "CarrierBookingService",
    "InvalidPostalCodeError",
    "NotificationDispatcher",
    "PostalCodeNotFoundError",
    "PostalLookupService",
    "PostalLookupUnavailableError",
    "build_cart_payload",
]
