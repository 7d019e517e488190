"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - sql_order_store: Store de pedidos em banco relacional (SQLAlchemy asyncio)
    - memory_order_store: Store em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.memory_order_store import MemoryOrderStore
from app.infra.stores.sql_order_store import SqlOrderStore, metadata, orders

__all__ = [
    # Memory (dev/test)
    "MemoryOrderStore",
    # SQLAlchemy
    "SqlOrderStore",
    "metadata",
    "orders",
]
