"""Protocolos e contratos do core da aplicação."""

from .carrier import CarrierClientProtocol
from .mail_provider import MailMessage, MailProviderProtocol
from .order_store import OrderStoreProtocol
from .payment_gateway import PaymentGatewayProtocol
from .postal_lookup import PostalSourceProtocol

__all__ = [
    "CarrierClientProtocol",
    "MailMessage",
    "MailProviderProtocol",
    "OrderStoreProtocol",
    "PaymentGatewayProtocol",
    "PostalSourceProtocol",
]
