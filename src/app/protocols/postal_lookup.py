"""Protocolo de consulta de CEP."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.shipping import AddressInfo


class PostalSourceProtocol(Protocol):
    """Uma fonte de CEP (ViaCEP, BrasilAPI).

    Retorna None quando a fonte informa que o CEP não existe; levanta
    HttpError quando a fonte está indisponível.
    """

    name: str

    async def fetch(self, postal_code: str) -> AddressInfo | None: ...
