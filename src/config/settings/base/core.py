"""Settings base do serviço de pedidos.

Configurações comuns a todas as integrações: ambiente, URLs públicas,
banco de dados e janela de pagamento.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./pedidos.db"


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs
        debug: Modo debug ativo
        backend_url: URL pública deste backend (usada no callback do webhook)
        frontend_url: URL da loja (usada nas back_urls do checkout)
        database_url: URL SQLAlchemy (async) do banco de pedidos
        payment_window_minutes: Janela de pagamento após a criação do pedido
        cron_secret: Token do endpoint de expiração (vazio = sem proteção)
        cors_origins: Origens liberadas para o frontend
    """

    # Ambiente
    environment: Environment = "development"
    service_name: str = "checkout-pedidos"
    debug: bool = False

    # URLs públicas
    backend_url: str = ""
    frontend_url: str = ""

    # Banco
    database_url: str = DEFAULT_DATABASE_URL

    # Regras de negócio
    payment_window_minutes: int = 60
    cron_secret: str = ""

    cors_origins: tuple[str, ...] = ("*",)

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment == "development"

    @property
    def payment_notification_url(self) -> str:
        """URL de callback registrada na preferência do Mercado Pago."""
        return f"{self.backend_url.rstrip('/')}/notificacao-pagamento"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        valid_envs = {"development", "staging", "production"}
        if self.environment not in valid_envs:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if not self.backend_url:
            errors.append("BACKEND_URL não configurado")

        if not self.frontend_url:
            errors.append("FRONTEND_URL não configurado")

        if self.payment_window_minutes <= 0:
            errors.append("PAYMENT_WINDOW_MINUTES deve ser > 0")

        if not self.is_development and self.database_url.startswith("sqlite"):
            errors.append("DATABASE_URL sqlite proibido fora de development")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _parse_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(item.strip() for item in raw.split(",") if item.strip())
    return origins or ("*",)


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "checkout-pedidos"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        backend_url=os.getenv("BACKEND_URL", ""),
        frontend_url=os.getenv("FRONTEND_URL", ""),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        payment_window_minutes=int(os.getenv("PAYMENT_WINDOW_MINUTES", "60")),
        cron_secret=os.getenv("CRON_SECRET", ""),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "*")),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
