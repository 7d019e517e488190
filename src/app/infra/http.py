"""Cliente HTTP base para integrações externas.

Timeout limitado e retry com backoff exponencial para erros de transporte,
429 e 5xx. Demais status são devolvidos ao chamador sem retry.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 10.0
    max_retries: int = 2
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP simples para chamadas externas.

    `transport` permite injetar httpx.MockTransport em testes.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        service: str = "http",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._service = service
        self._transport = transport

    @property
    def service(self) -> str:
        return self._service

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, headers=headers)

    async def post(
        self,
        url: str,
        json: dict[str, Any] | list[Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", url, json=json, headers=headers)

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        for attempt in range(self._config.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    verify=self._config.verify_ssl,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        json=json,
                        headers=merged_headers,
                        timeout=self._config.timeout_seconds,
                    )
                if response.status_code == 429 or response.status_code >= 500:
                    raise HttpError(
                        "http_retryable_status",
                        status_code=response.status_code,
                        is_retryable=True,
                    )
                return response
            except HttpError as exc:
                if not exc.is_retryable or attempt >= self._config.max_retries:
                    raise
                await self._retry_pause(attempt, exc.status_code)
            except httpx.TransportError as exc:
                # timeout, conexão recusada, reset e erro de protocolo
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                await self._retry_pause(attempt, None)
        raise HttpError("http_retry_exhausted", is_retryable=True)

    async def _retry_pause(self, attempt: int, status_code: int | None) -> None:
        logger.warning(
            "http_retry",
            extra={
                "upstream": self._service,
                "attempt": attempt + 1,
                "status_code": status_code,
            },
        )
        await _backoff_sleep(
            attempt,
            self._config.backoff_base_seconds,
            self._config.backoff_max_seconds,
        )


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff})
    await asyncio.sleep(backoff)
