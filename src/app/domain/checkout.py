"""Entradas do checkout, da cotação de frete e da consulta de pedido.

Os nomes de campo seguem o JSON enviado pela loja (camelCase); CPF,
telefone e CEP são normalizados para dígitos na validação.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.order import LineItem, ShippingOption, only_digits


class CustomerInfo(BaseModel):
    """Dados do comprador no formulário de checkout."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    cpf: str
    phone: str
    street: str = Field(..., min_length=1, alias="address")
    number: str = Field(..., min_length=1)
    complement: str | None = ""
    district: str = Field(..., min_length=1, alias="neighborhood")
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2, max_length=2)
    postal_code: str = Field(..., alias="cep")

    @field_validator("cpf")
    @classmethod
    def _cpf_digits(cls, value: str) -> str:
        digits = only_digits(value)
        if len(digits) != 11:
            raise ValueError("CPF deve conter 11 dígitos")
        return digits

    @field_validator("phone")
    @classmethod
    def _phone_digits(cls, value: str) -> str:
        digits = only_digits(value)
        if len(digits) < 10:
            raise ValueError("Telefone inválido")
        return digits

    @field_validator("postal_code")
    @classmethod
    def _cep_digits(cls, value: str) -> str:
        digits = only_digits(value)
        if len(digits) != 8:
            raise ValueError("CEP deve conter 8 dígitos")
        return digits

    @field_validator("number", mode="before")
    @classmethod
    def _number_as_str(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("state")
    @classmethod
    def _state_upper(cls, value: str) -> str:
        return value.upper()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CheckoutRequest(BaseModel):
    """Corpo de POST /criar-preferencia."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: list[LineItem] = Field(..., min_length=1)
    customer: CustomerInfo = Field(..., alias="customerInfo")
    selected_shipping: ShippingOption = Field(..., alias="selectedShipping")
    shipment_cost: Decimal = Field(..., ge=0, alias="shipmentCost")


class QuoteItem(BaseModel):
    """Item enviado para cotação de frete."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str | None = None
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class ShippingQuoteRequest(BaseModel):
    """Corpo de POST /calcular-frete."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    postal_code: str = Field(..., min_length=1, alias="cepDestino")
    items: list[QuoteItem] = Field(..., min_length=1)


class LookupQuery(BaseModel):
    """Corpo de POST /rastrear-pedido: (CPF + email) ou (rastreio + email)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    email: str = Field(..., min_length=3)
    cpf: str | None = None
    tracking_code: str | None = Field(default=None, alias="codigoRastreio")

    @field_validator("cpf")
    @classmethod
    def _cpf_digits(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        digits = only_digits(value)
        if len(digits) != 11:
            raise ValueError("CPF deve conter 11 dígitos")
        return digits

    @field_validator("tracking_code")
    @classmethod
    def _tracking_strip(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _identity_required(self) -> LookupQuery:
        if not self.cpf and not self.tracking_code:
            raise ValueError("Informe CPF ou código de rastreio")
        return self
