"""Agregador de settings do serviço de pedidos.

Re-exporta as settings de cada integração e monta o `AppConfig`,
construído uma única vez no startup e repassado aos componentes.
"""

from __future__ import annotations

from dataclasses import dataclass

# Base settings
from config.settings.base import (
    DEFAULT_DATABASE_URL,
    BaseSettings,
    Environment,
    get_base_settings,
)

# Email
from config.settings.email import EmailSettings, get_email_settings

# Integrações
from config.settings.melhor_envio import (
    MELHOR_ENVIO_API_BASE_URL,
    MelhorEnvioSettings,
    PackageDefaults,
    SenderSettings,
    get_melhor_envio_settings,
)
from config.settings.mercadopago import (
    MERCADOPAGO_API_BASE_URL,
    MercadoPagoSettings,
    get_mercadopago_settings,
)
from config.settings.postal import PostalSettings, get_postal_settings


@dataclass(frozen=True)
class AppConfig:
    """Configuração completa da aplicação.

    Nenhum componente lê variáveis de ambiente diretamente: recebe a
    seção correspondente deste objeto no construtor.
    """

    base: BaseSettings
    mercadopago: MercadoPagoSettings
    melhor_envio: MelhorEnvioSettings
    postal: PostalSettings
    email: EmailSettings

    def validate(self) -> list[str]:
        """Agrega erros de validação de todas as seções."""
        errors: list[str] = []
        errors.extend(f"base: {e}" for e in self.base.validate())
        errors.extend(f"mercadopago: {e}" for e in self.mercadopago.validate())
        errors.extend(f"melhor_envio: {e}" for e in self.melhor_envio.validate())
        errors.extend(f"postal: {e}" for e in self.postal.validate())
        errors.extend(f"email: {e}" for e in self.email.validate())
        return errors


def load_app_config() -> AppConfig:
    """Monta AppConfig a partir das settings cacheadas do ambiente."""
    return AppConfig(
        base=get_base_settings(),
        mercadopago=get_mercadopago_settings(),
        melhor_envio=get_melhor_envio_settings(),
        postal=get_postal_settings(),
        email=get_email_settings(),
    )


__all__ = [
    # Constants
    "DEFAULT_DATABASE_URL",
    "MELHOR_ENVIO_API_BASE_URL",
    "MERCADOPAGO_API_BASE_URL",
    # Aggregate
    "AppConfig",
    # Sections
    "BaseSettings",
    "EmailSettings",
    "Environment",
    "MelhorEnvioSettings",
    "MercadoPagoSettings",
    "PackageDefaults",
    "PostalSettings",
    "SenderSettings",
    "get_base_settings",
    "get_email_settings",
    "get_melhor_envio_settings",
    "get_mercadopago_settings",
    "get_postal_settings",
    "load_app_config",
]
