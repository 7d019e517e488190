"""Testes da reserva na transportadora."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from app.domain.order import LineItem, Order
from app.infra.stores import MemoryOrderStore
from app.services import CarrierBookingService, build_cart_payload
from app.services.carrier_booking import package_weight
from config.settings import MelhorEnvioSettings, PackageDefaults, SenderSettings
from tests.fakes.fake_order_services import FakeCarrierClient, make_new_order

SETTINGS = MelhorEnvioSettings(
    token="t",
    sender=SenderSettings(
        name="Loja",
        phone="(11) 3333-4444",
        document="12.345.678/0001-90",
        postal_code="01310-100",
    ),
)


def _order(**kwargs: object) -> Order:
    return Order.model_validate({**make_new_order(**kwargs).model_dump(), "id": 3})


def test_payload_blocks() -> None:
    payload = build_cart_payload(_order(), SETTINGS)

    assert payload["service"] == 1
    assert payload["from"]["postal_code"] == "01310100"
    assert payload["from"]["document"] == "12345678000190"
    assert payload["to"]["document"] == "12345678909"
    assert payload["to"]["postal_code"] == "01001000"
    assert payload["to"]["state_abbr"] == "SP"
    assert payload["products"][0] == {"name": "Camiseta", "quantity": 2, "unitary_value": 50.0}
    assert payload["options"]["insurance_value"] == 150.0
    assert payload["options"]["tags"][0]["tag"] == "Pedido #3"


def test_weight_uses_unit_weight_and_floor() -> None:
    assert package_weight(_order(), SETTINGS) == 0.9

    light = MelhorEnvioSettings(package=PackageDefaults(unit_weight_kg=0.001))
    single = _order(items=[LineItem(id="1", title="Adesivo", quantity=1, unit_price=Decimal("1"))])
    assert package_weight(single, light) == 0.01


def test_insurance_value_has_floor() -> None:
    cheap = _order(items=[LineItem(id="1", title="Brinde", quantity=1, unit_price=Decimal("0"))])

    assert build_cart_payload(cheap, SETTINGS)["options"]["insurance_value"] == 1.0


@pytest.mark.asyncio
async def test_book_records_shipment_id_once() -> None:
    store = MemoryOrderStore()
    order = await store.create(make_new_order())
    carrier = FakeCarrierClient()
    service = CarrierBookingService(carrier, store, SETTINGS)

    first = await service.book(order)
    second = await service.book(order)

    stored = await store.get(order.id)
    assert stored is not None
    assert stored.carrier_shipment_id == "shipment-1"
    assert first.details == {"shipment_id": "shipment-1", "stored": True}
    assert second.details["stored"] is False


@pytest.mark.asyncio
async def test_booking_failure_is_a_result(caplog: pytest.LogCaptureFixture) -> None:
    store = MemoryOrderStore()
    order = await store.create(make_new_order())
    carrier = FakeCarrierClient()
    carrier.fail_booking = True

    with caplog.at_level(logging.ERROR):
        result = await CarrierBookingService(carrier, store, SETTINGS).book(order)

    assert result.success is False
    assert result.details["status_code"] == 422
    record = next(r for r in caplog.records if r.getMessage() == "carrier_booking_failed")
    assert "to" not in record.request_payload
