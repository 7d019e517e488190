"""Consulta de CEP com fonte primária e fallback.

ViaCEP primeiro; se indisponível, BrasilAPI. "Não encontrado" na fonte
que respondeu encerra a consulta sem tentar a próxima.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.order import only_digits
from app.infra.http import HttpError
from config.logging import log_fallback
from utils.errors import UpstreamServiceError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.shipping import AddressInfo
    from app.protocols.postal_lookup import PostalSourceProtocol

logger = logging.getLogger(__name__)


class InvalidPostalCodeError(ValueError):
    """CEP fora do formato de 8 dígitos."""


class PostalCodeNotFoundError(ValueError):
    """CEP inexistente."""


class PostalLookupUnavailableError(UpstreamServiceError):
    """Todas as fontes de CEP indisponíveis."""

    def __init__(self, message: str = "postal_lookup_unavailable") -> None:
        super().__init__("postal", message)


def normalize_postal_code(raw: str) -> str:
    """Remove máscara e valida 8 dígitos.

    Raises:
        InvalidPostalCodeError: Se não restarem exatamente 8 dígitos
    """
    digits = only_digits(raw)
    if len(digits) != 8:
        raise InvalidPostalCodeError("CEP deve conter 8 dígitos")
    return digits


class PostalLookupService:
    """Resolve endereço a partir do CEP."""

    def __init__(self, sources: Sequence[PostalSourceProtocol]) -> None:
        if not sources:
            raise ValueError("PostalLookupService requer ao menos uma fonte")
        self._sources = list(sources)

    async def lookup(self, raw_postal_code: str) -> AddressInfo:
        postal_code = normalize_postal_code(raw_postal_code)
        failed: list[str] = []
        for source in self._sources:
            try:
                address = await source.fetch(postal_code)
            except HttpError as exc:
                logger.warning(
                    "postal_source_unavailable",
                    extra={
                        "source": source.name,
                        "status_code": exc.status_code,
                        "error": str(exc),
                    },
                )
                failed.append(source.name)
                continue
            if address is None:
                raise PostalCodeNotFoundError("CEP não encontrado")
            if failed:
                log_fallback(logger, "postal_lookup", reason=f"{failed[-1]}_unavailable")
            return address

        logger.error("postal_lookup_unavailable", extra={"sources": len(self._sources)})
        raise PostalLookupUnavailableError()
