"""Settings da consulta de CEP.

ViaCEP como fonte primária e BrasilAPI como fallback.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

VIACEP_BASE_URL: str = "https://viacep.com.br/ws"
BRASILAPI_BASE_URL: str = "https://brasilapi.com.br/api/cep/v1"


@dataclass(frozen=True)
class PostalSettings:
    """Configurações da consulta de CEP.

    Attributes:
        viacep_base_url: URL base do ViaCEP
        brasilapi_base_url: URL base do fallback BrasilAPI
        request_timeout_seconds: Timeout por tentativa
        max_retries: Tentativas extras por fonte
        backoff_base_seconds: Base do backoff exponencial
    """

    viacep_base_url: str = VIACEP_BASE_URL
    brasilapi_base_url: str = BRASILAPI_BASE_URL
    request_timeout_seconds: float = 5.0
    max_retries: int = 2
    backoff_base_seconds: float = 1.0

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.request_timeout_seconds <= 0:
            errors.append("POSTAL_REQUEST_TIMEOUT_SECONDS deve ser > 0")
        if self.max_retries < 0:
            errors.append("POSTAL_MAX_RETRIES deve ser >= 0")
        return errors


def _load_from_env() -> PostalSettings:
    """Carrega PostalSettings a partir de variáveis de ambiente."""
    return PostalSettings(
        viacep_base_url=os.getenv("VIACEP_BASE_URL", VIACEP_BASE_URL),
        brasilapi_base_url=os.getenv("BRASILAPI_CEP_BASE_URL", BRASILAPI_BASE_URL),
        request_timeout_seconds=float(os.getenv("POSTAL_REQUEST_TIMEOUT_SECONDS", "5")),
        max_retries=int(os.getenv("POSTAL_MAX_RETRIES", "2")),
        backoff_base_seconds=float(os.getenv("POSTAL_BACKOFF_BASE_SECONDS", "1")),
    )


@lru_cache(maxsize=1)
def get_postal_settings() -> PostalSettings:
    """Retorna instância cacheada de PostalSettings."""
    return _load_from_env()
