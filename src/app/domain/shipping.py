"""Modelos de domínio de frete e endereço."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.order import JsonMoney


class AddressInfo(BaseModel):
    """Endereço resolvido a partir de um CEP."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    postal_code: str = Field(..., serialization_alias="cep")
    street: str = Field(default="", serialization_alias="logradouro")
    district: str = Field(default="", serialization_alias="bairro")
    city: str = Field(default="", serialization_alias="localidade")
    state: str = Field(default="", serialization_alias="uf")
    source: str = Field(default="viacep", exclude=True)


class ShippingService(BaseModel):
    """Opção de frete cotada."""

    model_config = ConfigDict(populate_by_name=True)

    code: int | str
    name: str
    price: JsonMoney
    delivery_time: int | None = Field(default=None, serialization_alias="deliveryTime")


class ShippingQuote(BaseModel):
    """Resposta de cotação devolvida ao checkout."""

    model_config = ConfigDict(populate_by_name=True)

    services: list[ShippingService]
    address: AddressInfo = Field(..., serialization_alias="addressInfo")


class CarrierTrackingEvent(BaseModel):
    """Evento de rastreio recebido da transportadora."""

    model_config = ConfigDict(extra="ignore")

    shipment_id: str
    tracking_code: str | None = None
    event: str = "tracking"
