"""Store de pedidos em banco relacional (SQLAlchemy Core, asyncio).

Uma única tabela `orders`; itens e frete ficam serializados em JSON.
Datas são gravadas em UTC sem fuso (compatível com SQLite e MySQL) e
devolvidas como datetime com tzinfo=UTC.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    func,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.domain.order import DeliveryAddress, LineItem, NewOrder, Order, OrderChanges, ShippingOption
from app.protocols.order_store import OrderStoreProtocol
from fsm.states.order import DEFAULT_INITIAL_STATE, OrderStatus
from utils.errors import DatabaseUnavailableError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.engine import Row
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
    from sqlalchemy.sql import Select

    from fsm.types.transition import StatusTransition

logger = logging.getLogger(__name__)

metadata = MetaData()

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_name", String(255), nullable=False),
    Column("customer_email", String(255), nullable=False, index=True),
    Column("customer_cpf", String(11), nullable=False, index=True),
    Column("customer_phone", String(20), nullable=False),
    Column("street", String(255), nullable=False),
    Column("number", String(20), nullable=False),
    Column("complement", String(255), nullable=False, default=""),
    Column("district", String(120), nullable=False),
    Column("city", String(120), nullable=False),
    Column("state", String(2), nullable=False),
    Column("postal_code", String(8), nullable=False),
    Column("items", Text, nullable=False),
    Column("shipping", Text, nullable=False),
    Column("total", Numeric(12, 2), nullable=False),
    Column("status", String(32), nullable=False, index=True),
    Column("gateway_payment_id", String(64)),
    Column("payment_method", String(64)),
    Column("card_last_four", String(4)),
    Column("carrier_shipment_id", String(64), index=True),
    Column("tracking_code", String(64), index=True),
    Column("created_at", DateTime, nullable=False),
    Column("payment_deadline", DateTime, nullable=False, index=True),
    Column("paid_at", DateTime),
    Column("shipped_at", DateTime),
)

_DATETIME_COLUMNS = frozenset({"paid_at", "shipped_at"})


def _to_db(value: datetime) -> datetime:
    """Converte para UTC naive antes de gravar."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _from_db(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SqlOrderStore(OrderStoreProtocol):
    """Store de pedidos sobre AsyncEngine do SQLAlchemy."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def create_schema(self) -> None:
        """Cria a tabela se não existir (dev/test)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def create(self, new_order: NewOrder) -> Order:
        address = new_order.address
        values = {
            "customer_name": new_order.customer_name,
            "customer_email": new_order.customer_email,
            "customer_cpf": new_order.customer_cpf,
            "customer_phone": new_order.customer_phone,
            "street": address.street,
            "number": address.number,
            "complement": address.complement,
            "district": address.district,
            "city": address.city,
            "state": address.state,
            "postal_code": address.postal_code,
            "items": json.dumps([item.model_dump(mode="json") for item in new_order.items]),
            "shipping": json.dumps(new_order.shipping.model_dump(mode="json")),
            "total": new_order.total,
            "status": DEFAULT_INITIAL_STATE.value,
            "created_at": _to_db(new_order.created_at),
            "payment_deadline": _to_db(new_order.payment_deadline),
        }
        async with self._connect() as conn:
            result = await conn.execute(insert(orders).values(**values))
            order_id = int(result.inserted_primary_key[0])
        logger.info("order_created", extra={"order_id": order_id})
        return Order(id=order_id, status=DEFAULT_INITIAL_STATE, **new_order.model_dump())

    async def get(self, order_id: int) -> Order | None:
        return await self._fetch_one(select(orders).where(orders.c.id == order_id))

    async def find_by_carrier_shipment_id(self, shipment_id: str) -> Order | None:
        return await self._fetch_one(
            select(orders).where(orders.c.carrier_shipment_id == shipment_id).limit(1)
        )

    async def find_latest_by_cpf_and_email(self, cpf: str, email: str) -> Order | None:
        stmt = (
            select(orders)
            .where(
                orders.c.customer_cpf == cpf,
                func.lower(orders.c.customer_email) == email.strip().lower(),
            )
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
            .limit(1)
        )
        return await self._fetch_one(stmt)

    async def find_latest_by_tracking_and_email(
        self,
        tracking_code: str,
        email: str,
    ) -> Order | None:
        stmt = (
            select(orders)
            .where(
                orders.c.tracking_code == tracking_code,
                func.lower(orders.c.customer_email) == email.strip().lower(),
            )
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
            .limit(1)
        )
        return await self._fetch_one(stmt)

    async def list_overdue(
        self,
        statuses: frozenset[OrderStatus],
        now: datetime,
    ) -> list[Order]:
        stmt = (
            select(orders)
            .where(
                orders.c.status.in_(sorted(s.value for s in statuses)),
                orders.c.payment_deadline < _to_db(now),
            )
            .order_by(orders.c.id)
        )
        async with self._connect() as conn:
            result = await conn.execute(stmt)
            rows = result.fetchall()
        return [_row_to_order(row) for row in rows]

    async def apply_transition(
        self,
        transition: StatusTransition,
        changes: OrderChanges | None = None,
    ) -> bool:
        values: dict[str, Any] = {"status": transition.to_state.value}
        if changes is not None:
            for column, value in changes.as_dict().items():
                values[column] = _to_db(value) if column in _DATETIME_COLUMNS else value
        stmt = (
            update(orders)
            .where(
                orders.c.id == transition.order_id,
                orders.c.status.in_(sorted(s.value for s in transition.allowed_from)),
            )
            .values(**values)
        )
        async with self._connect() as conn:
            result = await conn.execute(stmt)
        return result.rowcount == 1

    async def set_carrier_shipment_id(self, order_id: int, shipment_id: str) -> bool:
        stmt = (
            update(orders)
            .where(orders.c.id == order_id, orders.c.carrier_shipment_id.is_(None))
            .values(carrier_shipment_id=shipment_id)
        )
        async with self._connect() as conn:
            result = await conn.execute(stmt)
        return result.rowcount == 1

    async def ping(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("database_ping_failed", extra={"error_type": type(exc).__name__})
            return False
        return True

    async def _fetch_one(self, stmt: Select) -> Order | None:
        async with self._connect() as conn:
            result = await conn.execute(stmt)
            row = result.first()
        return _row_to_order(row) if row is not None else None

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[AsyncConnection]:
        """Transação curta; falha de conexão vira DatabaseUnavailableError."""
        try:
            async with self._engine.begin() as conn:
                yield conn
        except OperationalError as exc:
            logger.error("database_unavailable", extra={"error_type": type(exc).__name__})
            raise DatabaseUnavailableError("database_unavailable") from exc


def _row_to_order(row: Row) -> Order:
    data = row._mapping
    return Order(
        id=data["id"],
        customer_name=data["customer_name"],
        customer_email=data["customer_email"],
        customer_cpf=data["customer_cpf"],
        customer_phone=data["customer_phone"],
        address=DeliveryAddress(
            street=data["street"],
            number=data["number"],
            complement=data["complement"] or "",
            district=data["district"],
            city=data["city"],
            state=data["state"],
            postal_code=data["postal_code"],
        ),
        items=[LineItem.model_validate(item) for item in json.loads(data["items"])],
        shipping=ShippingOption.model_validate(json.loads(data["shipping"])),
        total=data["total"],
        status=OrderStatus(data["status"]),
        gateway_payment_id=data["gateway_payment_id"],
        payment_method=data["payment_method"],
        card_last_four=data["card_last_four"],
        carrier_shipment_id=data["carrier_shipment_id"],
        tracking_code=data["tracking_code"],
        created_at=_from_db(data["created_at"]),
        payment_deadline=_from_db(data["payment_deadline"]),
        paid_at=_from_db(data["paid_at"]),
        shipped_at=_from_db(data["shipped_at"]),
    )
