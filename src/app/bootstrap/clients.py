"""Factories de clientes externos: engine do banco de pedidos."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import create_async_engine

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def create_database_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Cria engine SQLAlchemy assíncrona.

    Args:
        database_url: URL async (sqlite+aiosqlite://, mysql+aiomysql://)
        echo: Loga SQL emitido (apenas debug local)

    Raises:
        ValueError: Se a URL estiver vazia
    """
    if not database_url:
        msg = "DATABASE_URL não configurado"
        raise ValueError(msg)

    engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)
    logger.info("database_engine_created", extra={"dialect": engine.dialect.name})
    return engine
