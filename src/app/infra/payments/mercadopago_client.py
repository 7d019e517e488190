"""Cliente Mercado Pago (pagamentos e preferências de checkout).

O status do pagamento sempre vem de GET /v1/payments/{id}; a resposta é
decodificada estritamente antes de chegar ao caso de uso.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from app.domain.payment import CheckoutSession, PaymentRecord
from app.infra.http import HttpClient, HttpClientConfig, HttpError
from utils.errors import UpstreamServiceError

if TYPE_CHECKING:
    import httpx

    from config.settings import MercadoPagoSettings

logger = logging.getLogger(__name__)

SERVICE = "mercadopago"


class PaymentGatewayError(UpstreamServiceError):
    """Falha de comunicação com o Mercado Pago."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(SERVICE, message, status_code)


class PaymentDecodeError(ValueError):
    """Resposta do gateway fora do formato esperado."""


class _CardPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    last_four_digits: str | None = None


class _PaymentPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str
    status: str
    status_detail: str | None = None
    payment_method_id: str | None = None
    payment_type_id: str | None = None
    external_reference: str | None = None
    card: _CardPayload | None = None

    @field_validator("external_reference", mode="before")
    @classmethod
    def _coerce_reference(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class _PreferencePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    init_point: str


class MercadoPagoClient:
    """Adapter do Mercado Pago sobre o HttpClient com retry."""

    def __init__(
        self,
        settings: MercadoPagoSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._http = HttpClient(
            HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=settings.max_retries,
                default_headers={
                    "Authorization": f"Bearer {settings.access_token}",
                    "Accept": "application/json",
                },
            ),
            service=SERVICE,
            transport=transport,
        )

    async def get_payment(self, payment_id: str) -> PaymentRecord:
        """Busca o pagamento autoritativo no gateway.

        Raises:
            PaymentGatewayError: Gateway indisponível ou status de erro
            PaymentDecodeError: Corpo fora do formato esperado
        """
        data = await self._call("GET", self._settings.payment_endpoint(payment_id))
        try:
            payload = _PaymentPayload.model_validate(data)
        except ValidationError as exc:
            raise PaymentDecodeError("payment_payload_invalid") from exc

        method = payload.payment_type_id or payload.payment_method_id
        if payload.payment_method_id == "pix":
            method = "pix"
        return PaymentRecord(
            id=str(payload.id),
            status=payload.status,
            status_detail=payload.status_detail,
            payment_method=method,
            card_last_four=payload.card.last_four_digits if payload.card else None,
            external_reference=payload.external_reference,
        )

    async def create_preference(self, body: dict[str, Any]) -> CheckoutSession:
        """Cria preferência de Checkout Pro.

        Usa external_reference como chave de idempotência.
        """
        headers = {}
        reference = body.get("external_reference")
        if reference:
            headers["X-Idempotency-Key"] = f"preference-{reference}"
        data = await self._call("POST", self._settings.preferences_endpoint, body, headers)
        try:
            payload = _PreferencePayload.model_validate(data)
        except ValidationError as exc:
            raise PaymentDecodeError("preference_payload_invalid") from exc
        return CheckoutSession(id=payload.id, init_point=payload.init_point)

    async def _call(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._http.request(method, url, json=body, headers=headers)
        except HttpError as exc:
            logger.error(
                "mercadopago_request_failed",
                extra={"method": method, "status_code": exc.status_code, "error": str(exc)},
            )
            raise PaymentGatewayError(str(exc), exc.status_code) from exc

        if response.status_code >= 400:
            logger.error(
                "mercadopago_error_status",
                extra={"method": method, "status_code": response.status_code},
            )
            raise PaymentGatewayError("mercadopago_error_status", response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise PaymentDecodeError("mercadopago_invalid_json") from exc
