"""Settings específicas do Melhor Envio.

Configurações da transportadora: cotação de frete, inserção no carrinho
e dados fixos do remetente.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache

MELHOR_ENVIO_API_BASE_URL: str = "https://www.melhorenvio.com.br/api/v2"

# Serviços aceitos na cotação: (empresa, serviço). Serviço vazio = qualquer um.
DEFAULT_ALLOWED_SERVICES: tuple[tuple[str, str], ...] = (
    ("Correios", "SEDEX"),
    ("Loggi", ""),
)


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


@dataclass(frozen=True)
class SenderSettings:
    """Bloco fixo do remetente enviado em cada etiqueta."""

    name: str = ""
    phone: str = ""
    email: str = ""
    document: str = ""
    street: str = ""
    number: str = ""
    complement: str = ""
    district: str = ""
    city: str = ""
    state_abbr: str = ""
    postal_code: str = ""

    def as_payload(self) -> dict[str, str]:
        """Formato `from` esperado pela API do Melhor Envio."""
        return {
            "name": self.name,
            "phone": _digits(self.phone),
            "email": self.email,
            "document": _digits(self.document),
            "address": self.street,
            "complement": self.complement,
            "number": self.number,
            "district": self.district,
            "city": self.city,
            "state_abbr": self.state_abbr,
            "country_id": "BR",
            "postal_code": _digits(self.postal_code),
        }

    def validate(self) -> list[str]:
        errors: list[str] = []
        if len(_digits(self.postal_code)) != 8:
            errors.append("SENDER_CEP deve ter 8 dígitos")
        if not self.name:
            errors.append("SENDER_NAME não configurado")
        if not _digits(self.document):
            errors.append("SENDER_DOCUMENT não configurado")
        return errors


@dataclass(frozen=True)
class PackageDefaults:
    """Dimensões e peso padrão por unidade (sem cadastro de produto)."""

    height_cm: int = 10
    width_cm: int = 15
    length_cm: int = 20
    unit_weight_kg: float = 0.3
    min_weight_kg: float = 0.01


@dataclass(frozen=True)
class MelhorEnvioSettings:
    """Configurações do Melhor Envio.

    Attributes:
        token: Bearer token da aplicação
        api_base_url: URL base da API v2
        user_agent: User-Agent exigido pela API (nome + email de contato)
        webhook_secret: Secret da aplicação para X-ME-Signature (vazio = desativado)
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas em erros transitórios
        sender: Dados do remetente
        package: Dimensões/peso padrão
        allowed_services: Serviços aceitos na cotação
    """

    token: str = ""
    api_base_url: str = MELHOR_ENVIO_API_BASE_URL
    user_agent: str = "checkout-pedidos"
    webhook_secret: str = ""
    request_timeout_seconds: float = 8.0
    max_retries: int = 2
    sender: SenderSettings = field(default_factory=SenderSettings)
    package: PackageDefaults = field(default_factory=PackageDefaults)
    allowed_services: tuple[tuple[str, str], ...] = DEFAULT_ALLOWED_SERVICES

    @property
    def cart_endpoint(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/me/cart"

    @property
    def calculate_endpoint(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/me/shipment/calculate"

    def validate(self) -> list[str]:
        """Valida configurações mínimas do Melhor Envio.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.token:
            errors.append("MELHOR_ENVIO_TOKEN não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("MELHOR_ENVIO_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        errors.extend(self.sender.validate())
        return errors


def _parse_allowed_services(raw: str) -> tuple[tuple[str, str], ...]:
    """Converte 'Correios:SEDEX,Loggi' em pares (empresa, serviço)."""
    if not raw.strip():
        return DEFAULT_ALLOWED_SERVICES
    pairs: list[tuple[str, str]] = []
    for chunk in raw.split(","):
        company, _, service = chunk.strip().partition(":")
        if company:
            pairs.append((company.strip(), service.strip()))
    return tuple(pairs)


def _load_from_env() -> MelhorEnvioSettings:
    """Carrega MelhorEnvioSettings a partir de variáveis de ambiente."""
    sender = SenderSettings(
        name=os.getenv("SENDER_NAME", ""),
        phone=os.getenv("SENDER_PHONE", ""),
        email=os.getenv("SENDER_EMAIL", ""),
        document=os.getenv("SENDER_DOCUMENT", ""),
        street=os.getenv("SENDER_STREET", ""),
        number=os.getenv("SENDER_NUMBER", ""),
        complement=os.getenv("SENDER_COMPLEMENT", ""),
        district=os.getenv("SENDER_DISTRICT", ""),
        city=os.getenv("SENDER_CITY", ""),
        state_abbr=os.getenv("SENDER_STATE_ABBR", ""),
        postal_code=os.getenv("SENDER_CEP", ""),
    )
    return MelhorEnvioSettings(
        token=os.getenv("MELHOR_ENVIO_TOKEN", ""),
        api_base_url=os.getenv("MELHOR_ENVIO_API_BASE_URL", MELHOR_ENVIO_API_BASE_URL),
        user_agent=os.getenv("MELHOR_ENVIO_USER_AGENT", "checkout-pedidos"),
        webhook_secret=os.getenv("MELHOR_ENVIO_WEBHOOK_SECRET", ""),
        request_timeout_seconds=float(
            os.getenv("MELHOR_ENVIO_REQUEST_TIMEOUT_SECONDS", "8")
        ),
        max_retries=int(os.getenv("MELHOR_ENVIO_MAX_RETRIES", "2")),
        sender=sender,
        allowed_services=_parse_allowed_services(
            os.getenv("MELHOR_ENVIO_ALLOWED_SERVICES", "")
        ),
    )


@lru_cache(maxsize=1)
def get_melhor_envio_settings() -> MelhorEnvioSettings:
    """Retorna instância cacheada de MelhorEnvioSettings."""
    return _load_from_env()
