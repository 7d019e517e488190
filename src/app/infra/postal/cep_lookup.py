"""Fontes de consulta de CEP (ViaCEP e BrasilAPI).

Cada fonte devolve None quando o CEP não existe e propaga HttpError
quando está indisponível após os retries do HttpClient.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.domain.shipping import AddressInfo
from app.infra.http import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    import httpx

    from config.settings import PostalSettings

logger = logging.getLogger(__name__)


def _http_client(
    settings: PostalSettings,
    service: str,
    transport: httpx.AsyncBaseTransport | None,
) -> HttpClient:
    return HttpClient(
        HttpClientConfig(
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
            backoff_base_seconds=settings.backoff_base_seconds,
            default_headers={"Accept": "application/json"},
        ),
        service=service,
        transport=transport,
    )


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise HttpError("postal_invalid_json", status_code=response.status_code) from exc
    if not isinstance(data, dict):
        raise HttpError("postal_unexpected_payload", status_code=response.status_code)
    return data


class ViaCepSource:
    """Fonte primária: https://viacep.com.br/ws/{cep}/json/"""

    name = "viacep"

    def __init__(
        self,
        settings: PostalSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = settings.viacep_base_url.rstrip("/")
        self._http = _http_client(settings, self.name, transport)

    async def fetch(self, postal_code: str) -> AddressInfo | None:
        response = await self._http.get(f"{self._base_url}/{postal_code}/json/")
        if response.status_code in (400, 404):
            return None
        data = _json(response)
        # ViaCEP responde 200 com {"erro": true} (às vezes "true") para CEP inexistente
        if str(data.get("erro", "")).lower() == "true":
            return None
        return AddressInfo(
            postal_code=postal_code,
            street=data.get("logradouro") or "",
            district=data.get("bairro") or "",
            city=data.get("localidade") or "",
            state=data.get("uf") or "",
            source=self.name,
        )


class BrasilApiSource:
    """Fonte de fallback: https://brasilapi.com.br/api/cep/v1/{cep}"""

    name = "brasilapi"

    def __init__(
        self,
        settings: PostalSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = settings.brasilapi_base_url.rstrip("/")
        self._http = _http_client(settings, self.name, transport)

    async def fetch(self, postal_code: str) -> AddressInfo | None:
        response = await self._http.get(f"{self._base_url}/{postal_code}")
        if response.status_code in (400, 404):
            return None
        data = _json(response)
        return AddressInfo(
            postal_code=postal_code,
            street=data.get("street") or "",
            district=data.get("neighborhood") or "",
            city=data.get("city") or "",
            state=data.get("state") or "",
            source=self.name,
        )
