"""Modelos de domínio do pedido.

Valores monetários são Decimal com duas casas. O total é calculado uma
única vez na criação e nunca recalculado.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import UTC, datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from fsm.states.order import DEFAULT_INITIAL_STATE, OrderStatus

_NON_DIGITS = re.compile(r"\D")
CENTS = Decimal("0.01")

# Valores devolvidos ao frontend saem como número JSON
JsonMoney = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def only_digits(value: str | None) -> str:
    """Remove tudo que não for dígito (CPF, CEP, telefone)."""
    return _NON_DIGITS.sub("", value or "")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Normaliza valor monetário para Decimal com duas casas."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LineItem(BaseModel):
    """Item do carrinho no formato enviado pela loja."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)
    picture_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        # Catálogo pode enviar ids numéricos
        return str(value) if isinstance(value, int) else value

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)


class ShippingOption(BaseModel):
    """Opção de frete escolhida no checkout."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: int | str
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    delivery_time: int | None = Field(default=None, alias="deliveryTime")


class DeliveryAddress(BaseModel):
    """Endereço de entrega normalizado."""

    model_config = ConfigDict(extra="ignore")

    street: str = Field(..., min_length=1)
    number: str = Field(..., min_length=1)
    complement: str = ""
    district: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2, max_length=2)
    postal_code: str = Field(..., pattern=r"^\d{8}$")

    def one_line(self) -> str:
        """Endereço em uma linha, usado em emails."""
        complement = f" {self.complement}" if self.complement else ""
        return (
            f"{self.street}, {self.number}{complement} - {self.district}, "
            f"{self.city}/{self.state}, CEP: {self.postal_code}"
        )


def compute_total(items: list[LineItem], shipping_price: Decimal) -> Decimal:
    """Σ(preço unitário × quantidade) + frete."""
    subtotal = sum((item.subtotal for item in items), Decimal("0"))
    return to_money(subtotal + shipping_price)


class NewOrder(BaseModel):
    """Dados de um pedido ainda não persistido."""

    model_config = ConfigDict(extra="ignore")

    customer_name: str = Field(..., min_length=1)
    customer_email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    customer_cpf: str = Field(..., pattern=r"^\d{11}$")
    customer_phone: str = Field(..., min_length=8)
    address: DeliveryAddress
    items: list[LineItem] = Field(..., min_length=1)
    shipping: ShippingOption
    total: Decimal
    created_at: datetime = Field(default_factory=_utcnow)
    payment_deadline: datetime

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.total - self.shipping.price)


class Order(NewOrder):
    """Pedido persistido."""

    id: int
    status: OrderStatus = DEFAULT_INITIAL_STATE
    gateway_payment_id: str | None = None
    payment_method: str | None = None
    card_last_four: str | None = None
    carrier_shipment_id: str | None = None
    tracking_code: str | None = None
    paid_at: datetime | None = None
    shipped_at: datetime | None = None

    @property
    def has_carrier_shipment(self) -> bool:
        return bool(self.carrier_shipment_id)

    def log_context(self) -> dict[str, object]:
        """Campos seguros para log (sem PII)."""
        return {"order_id": self.id, "status": self.status.name}


@dataclass(frozen=True, slots=True)
class OrderChanges:
    """Colunas gravadas junto com uma transição de status."""

    gateway_payment_id: str | None = None
    payment_method: str | None = None
    card_last_four: str | None = None
    paid_at: datetime | None = None
    tracking_code: str | None = None
    shipped_at: datetime | None = None

    def as_dict(self) -> dict[str, object]:
        """Somente campos preenchidos; None não sobrescreve coluna."""
        return {key: value for key, value in asdict(self).items() if value is not None}


# Rótulos exibidos ao cliente na consulta de pedido
PAYMENT_METHOD_LABELS: dict[str, str] = {
    "credit_card": "Cartão de Crédito",
    "debit_card": "Cartão de Débito",
    "prepaid_card": "Cartão Pré-pago",
    "pix": "PIX",
    "bank_transfer": "PIX",
    "ticket": "Boleto",
    "account_money": "Saldo Mercado Pago",
}
DEFAULT_PAYMENT_METHOD_LABEL = "Cartão de Crédito ou PIX"


def payment_method_label(method: str | None) -> str:
    if not method:
        return DEFAULT_PAYMENT_METHOD_LABEL
    return PAYMENT_METHOD_LABELS.get(method, method)


def mask_card(last_four: str | None) -> str | None:
    """Mascara cartão como '**** 1234'."""
    if not last_four:
        return None
    return f"**** {last_four[-4:]}"


class SnapshotCustomer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., serialization_alias="nome")


class SnapshotAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    street: str = Field(..., serialization_alias="rua")
    district: str = Field(..., serialization_alias="bairro")
    city: str = Field(..., serialization_alias="cidade")
    state: str = Field(..., serialization_alias="estado")
    postal_code: str = Field(..., serialization_alias="cep")


class SnapshotItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = Field(..., serialization_alias="nome")
    quantity: int = Field(..., serialization_alias="quantidade")
    price: JsonMoney = Field(..., serialization_alias="preco")
    image_url: str | None = Field(default=None, serialization_alias="imagemUrl")


class SnapshotPayment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    method: str = Field(..., serialization_alias="metodo")
    card_masked: str | None = Field(default=None, serialization_alias="final_cartao")


class OrderSnapshot(BaseModel):
    """Visão sanitizada do pedido para o cliente.

    Nunca inclui CPF nem o id de pagamento do gateway.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    status: OrderStatus
    tracking_code: str | None = Field(default=None, serialization_alias="codigo_rastreio")
    created_at: datetime = Field(..., serialization_alias="data_criacao")
    paid_at: datetime | None = Field(default=None, serialization_alias="data_pagamento")
    shipped_at: datetime | None = Field(default=None, serialization_alias="data_envio")
    customer: SnapshotCustomer = Field(..., serialization_alias="cliente")
    address: SnapshotAddress = Field(..., serialization_alias="endereco_entrega")
    items: list[SnapshotItem] = Field(..., serialization_alias="itens")
    payment: SnapshotPayment = Field(..., serialization_alias="pagamento")
    shipping_name: str = Field(..., serialization_alias="servico_frete")
    shipping_price: JsonMoney = Field(..., serialization_alias="frete")
    total: JsonMoney = Field(..., serialization_alias="valor_total")

    @classmethod
    def from_order(cls, order: Order) -> OrderSnapshot:
        address = order.address
        return cls(
            id=order.id,
            status=order.status,
            tracking_code=order.tracking_code,
            created_at=order.created_at,
            paid_at=order.paid_at,
            shipped_at=order.shipped_at,
            customer=SnapshotCustomer(name=order.customer_name),
            address=SnapshotAddress(
                street=f"{address.street}, {address.number}",
                district=address.district,
                city=address.city,
                state=address.state,
                postal_code=address.postal_code,
            ),
            items=[
                SnapshotItem(
                    id=item.id,
                    name=item.title,
                    quantity=item.quantity,
                    price=item.unit_price,
                    image_url=item.picture_url,
                )
                for item in order.items
            ],
            payment=SnapshotPayment(
                method=payment_method_label(order.payment_method),
                card_masked=mask_card(order.card_last_four),
            ),
            shipping_name=order.shipping.name,
            shipping_price=order.shipping.price,
            total=order.total,
        )
