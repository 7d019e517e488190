"""Cliente Melhor Envio (cotação e carrinho de etiquetas)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpClientConfig, HttpError
from utils.errors import UpstreamServiceError

if TYPE_CHECKING:
    import httpx

    from config.settings import MelhorEnvioSettings

logger = logging.getLogger(__name__)

SERVICE = "melhor_envio"


class CarrierBookingError(UpstreamServiceError):
    """Inserção no carrinho recusada ou transportadora indisponível.

    Carrega o payload enviado e a resposta para diagnóstico.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        request_payload: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(SERVICE, message, status_code)
        self.request_payload = request_payload or {}
        self.response_body = response_body


class ShippingQuoteError(UpstreamServiceError):
    """Falha ao cotar frete."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(SERVICE, message, status_code)


class MelhorEnvioClient:
    """Adapter HTTP do Melhor Envio."""

    def __init__(
        self,
        settings: MelhorEnvioSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._http = HttpClient(
            HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=settings.max_retries,
                default_headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {settings.token}",
                    "User-Agent": settings.user_agent,
                },
            ),
            service=SERVICE,
            transport=transport,
        )

    async def add_to_cart(self, payload: dict[str, Any]) -> str:
        """Insere o envio no carrinho e retorna o id da remessa.

        Raises:
            CarrierBookingError: Resposta não-2xx, sem id ou rede indisponível
        """
        try:
            response = await self._http.post(self._settings.cart_endpoint, json=payload)
        except HttpError as exc:
            raise CarrierBookingError(
                str(exc),
                exc.status_code,
                request_payload=payload,
            ) from exc

        body = _json_or_text(response)
        if response.status_code >= 400:
            raise CarrierBookingError(
                "cart_insert_rejected",
                response.status_code,
                request_payload=payload,
                response_body=body,
            )
        shipment_id = body.get("id") if isinstance(body, dict) else None
        if not shipment_id:
            raise CarrierBookingError(
                "cart_insert_missing_id",
                response.status_code,
                request_payload=payload,
                response_body=body,
            )
        return str(shipment_id)

    async def calculate(self, payload: dict[str, Any]) -> list[dict[str, Any]]:
        """Cota frete para o CEP de destino.

        Raises:
            ShippingQuoteError: Resposta não-2xx, formato inesperado ou rede indisponível
        """
        try:
            response = await self._http.post(self._settings.calculate_endpoint, json=payload)
        except HttpError as exc:
            raise ShippingQuoteError(str(exc), exc.status_code) from exc

        body = _json_or_text(response)
        if response.status_code >= 400:
            logger.error(
                "shipping_quote_rejected",
                extra={"status_code": response.status_code, "response": body},
            )
            raise ShippingQuoteError("shipping_quote_rejected", response.status_code)
        if not isinstance(body, list):
            raise ShippingQuoteError("shipping_quote_unexpected_payload", response.status_code)
        return [option for option in body if isinstance(option, dict)]


def _json_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
