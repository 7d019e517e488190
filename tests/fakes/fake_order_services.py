"""Fakes de gateway, transportadora e email para testes deterministas.

Implementam os protocolos sem IO e registram as chamadas para que os
testes verifiquem quantas vezes cada efeito colateral foi disparado.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from app.domain.order import DeliveryAddress, LineItem, NewOrder, ShippingOption, compute_total
from app.domain.payment import CheckoutSession, PaymentRecord
from app.domain.shipping import AddressInfo
from app.infra.mail import SenderIdentityError
from app.infra.payments import PaymentGatewayError
from app.infra.shipping import CarrierBookingError
from app.protocols.mail_provider import MailMessage

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def make_new_order(
    *,
    created_at: datetime = NOW,
    window_minutes: int = 60,
    email: str = "cliente@example.com",
    cpf: str = "12345678909",
    items: list[LineItem] | None = None,
    shipping_price: Decimal = Decimal("20.00"),
) -> NewOrder:
    items = items or [
        LineItem(id="1", title="Camiseta", quantity=2, unit_price=Decimal("50.00")),
        LineItem(id="2", title="Caneca", quantity=1, unit_price=Decimal("50.00")),
    ]
    shipping = ShippingOption(code=1, name="Correios - SEDEX", price=shipping_price)
    return NewOrder(
        customer_name="Maria Souza",
        customer_email=email,
        customer_cpf=cpf,
        customer_phone="11987654321",
        address=DeliveryAddress(
            street="Rua das Flores",
            number="100",
            complement="Apto 12",
            district="Centro",
            city="São Paulo",
            state="SP",
            postal_code="01001000",
        ),
        items=items,
        shipping=shipping,
        total=compute_total(items, shipping_price),
        created_at=created_at,
        payment_deadline=created_at + timedelta(minutes=window_minutes),
    )


def approved_payment(order_id: int, payment_id: str = "9001", **overrides: Any) -> PaymentRecord:
    data: dict[str, Any] = {
        "id": payment_id,
        "status": "approved",
        "status_detail": "accredited",
        "payment_method": "credit_card",
        "card_last_four": "4242",
        "external_reference": str(order_id),
    }
    data.update(overrides)
    return PaymentRecord(**data)


class FakePaymentGateway:
    """Gateway em memória: pagamentos por id e preferências registradas."""

    def __init__(self, payments: dict[str, PaymentRecord] | None = None) -> None:
        self.payments = dict(payments or {})
        self.preferences: list[dict[str, Any]] = []
        self.get_calls = 0
        self.fail_preference = False
        self.delay_seconds = 0.0

    async def get_payment(self, payment_id: str) -> PaymentRecord:
        self.get_calls += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        payment = self.payments.get(payment_id)
        if payment is None:
            raise PaymentGatewayError("payment_not_found", status_code=404)
        return payment

    async def create_preference(self, body: dict[str, Any]) -> CheckoutSession:
        if self.fail_preference:
            raise PaymentGatewayError("preference_rejected", status_code=400)
        self.preferences.append(body)
        ref = body["external_reference"]
        return CheckoutSession(
            id=f"pref-{ref}",
            init_point=f"https://www.mercadopago.com.br/checkout/v1/redirect?pref_id=pref-{ref}",
        )


class FakeCarrierClient:
    """Transportadora em memória."""

    def __init__(self, options: list[dict[str, Any]] | None = None) -> None:
        self.cart_payloads: list[dict[str, Any]] = []
        self.calculate_payloads: list[dict[str, Any]] = []
        self.options = options or []
        self.fail_booking = False
        self._counter = 0

    async def add_to_cart(self, payload: dict[str, Any]) -> str:
        self.cart_payloads.append(payload)
        if self.fail_booking:
            raise CarrierBookingError(
                "cart_rejected",
                status_code=422,
                request_payload=payload,
                response_body={"message": "invalid"},
            )
        self._counter += 1
        return f"shipment-{self._counter}"

    async def calculate(self, payload: dict[str, Any]) -> list[dict[str, Any]]:
        self.calculate_payloads.append(payload)
        return list(self.options)


class FakeMailProvider:
    """Provedor de email que guarda as mensagens enviadas."""

    def __init__(self, name: str = "fake", *, reject_senders: tuple[str, ...] = ()) -> None:
        self.name = name
        self.is_configured = True
        self.sent: list[MailMessage] = []
        self.attempts = 0
        self._reject_senders = reject_senders

    async def send(self, message: MailMessage) -> str | None:
        self.attempts += 1
        if message.sender in self._reject_senders:
            raise SenderIdentityError(self.name, "sender not verified", status_code=403)
        self.sent.append(message)
        return f"msg-{len(self.sent)}"


class FakePostalSource:
    """Fonte de CEP com respostas fixas."""

    def __init__(self, name: str, address: AddressInfo | None = None) -> None:
        self.name = name
        self._address = address
        self.calls: list[str] = []

    async def fetch(self, postal_code: str) -> AddressInfo | None:
        self.calls.append(postal_code)
        return self._address
