"""Protocolo da transportadora (cotação e reserva de etiqueta)."""

from __future__ import annotations

from typing import Any, Protocol


class CarrierClientProtocol(Protocol):
    """Contrato mínimo do cliente da transportadora."""

    async def add_to_cart(self, payload: dict[str, Any]) -> str:
        """Reserva o envio e retorna o id da remessa."""
        ...

    async def calculate(self, payload: dict[str, Any]) -> list[dict[str, Any]]: ...
