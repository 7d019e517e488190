"""Execução protegida de efeitos colaterais após uma transição gravada."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.notifications import SideEffectResult

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)


async def run_side_effect(
    name: str,
    order_id: int,
    effect: Awaitable[SideEffectResult],
) -> SideEffectResult:
    """Aguarda o efeito; exceção inesperada vira resultado de falha.

    A transição já está gravada e não é desfeita.
    """
    try:
        return await effect
    except Exception as exc:
        logger.exception(
            "side_effect_unexpected_error",
            extra={"side_effect": name, "order_id": order_id, "error_type": type(exc).__name__},
        )
        return SideEffectResult.failed(name, type(exc).__name__)
