"""Settings específicas do Mercado Pago.

Configurações do gateway de pagamento (Checkout Pro + webhook de pagamentos).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

MERCADOPAGO_API_BASE_URL: str = "https://api.mercadopago.com"


@dataclass(frozen=True)
class MercadoPagoSettings:
    """Configurações do Mercado Pago.

    Attributes:
        access_token: Token de acesso da aplicação
        webhook_secret: Secret para validação HMAC do webhook (vazio = desativado)
        api_base_url: URL base da API
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas em erros transitórios
    """

    access_token: str = ""
    webhook_secret: str = ""
    api_base_url: str = MERCADOPAGO_API_BASE_URL
    request_timeout_seconds: float = 10.0
    max_retries: int = 2

    @property
    def signature_enabled(self) -> bool:
        """True se a validação de assinatura do webhook está ativa."""
        return bool(self.webhook_secret)

    def payment_endpoint(self, payment_id: str) -> str:
        """URL de consulta de um pagamento."""
        if not payment_id:
            raise ValueError("payment_id é obrigatório")
        return f"{self.api_base_url.rstrip('/')}/v1/payments/{payment_id}"

    @property
    def preferences_endpoint(self) -> str:
        """URL de criação de preferências do Checkout Pro."""
        return f"{self.api_base_url.rstrip('/')}/checkout/preferences"

    def validate(self) -> list[str]:
        """Valida configurações mínimas do Mercado Pago.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.access_token:
            errors.append("MP_ACCESS_TOKEN não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("MP_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("MP_MAX_RETRIES deve ser >= 0")

        return errors


def _load_from_env() -> MercadoPagoSettings:
    """Carrega MercadoPagoSettings a partir de variáveis de ambiente."""
    return MercadoPagoSettings(
        access_token=os.getenv("MP_ACCESS_TOKEN", ""),
        webhook_secret=os.getenv("MP_WEBHOOK_SECRET", ""),
        api_base_url=os.getenv("MP_API_BASE_URL", MERCADOPAGO_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("MP_REQUEST_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("MP_MAX_RETRIES", "2")),
    )


@lru_cache(maxsize=1)
def get_mercadopago_settings() -> MercadoPagoSettings:
    """Retorna instância cacheada de MercadoPagoSettings."""
    return _load_from_env()
