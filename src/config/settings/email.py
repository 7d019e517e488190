"""Settings específicas de Email.

Envio transacional via provedor HTTP (Resend) e/ou SMTP, na ordem
configurada em EMAIL_PROVIDERS.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

RESEND_API_URL: str = "https://api.resend.com/emails"
VALID_PROVIDERS = frozenset({"resend", "smtp"})


@dataclass(frozen=True)
class EmailSettings:
    """Configurações do canal Email.

    Attributes:
        providers: Ordem de preferência dos provedores (resend|smtp)
        from_email: Remetente padrão
        from_name: Nome exibido no remetente
        fallback_from_email: Remetente verificado alternativo (erro de identidade)
        operator_email: Endereço da loja em cópia oculta na confirmação
        smtp_host: Host do servidor SMTP
        smtp_port: Porta do servidor SMTP
        smtp_username: Usuário SMTP
        smtp_password: Senha SMTP
        smtp_use_ssl: SMTP sobre SSL (porta 465); False usa STARTTLS
        resend_api_key: API key do Resend
        resend_api_url: Endpoint de envio do Resend
        request_timeout_seconds: Timeout de envio
    """

    providers: tuple[str, ...] = ("smtp",)

    # Identidade
    from_email: str = ""
    from_name: str = "Loja"
    fallback_from_email: str = ""
    operator_email: str = ""

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_ssl: bool = False

    # Resend
    resend_api_key: str = ""
    resend_api_url: str = RESEND_API_URL

    request_timeout_seconds: float = 15.0

    @property
    def formatted_from(self) -> str:
        return f'"{self.from_name}" <{self.from_email}>'

    @property
    def formatted_fallback_from(self) -> str:
        if not self.fallback_from_email:
            return ""
        return f'"{self.from_name}" <{self.fallback_from_email}>'

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Email."""
        errors: list[str] = []
        unknown = [p for p in self.providers if p not in VALID_PROVIDERS]
        if unknown:
            errors.append(f"EMAIL_PROVIDERS inválido: {', '.join(unknown)}")
        if not self.providers:
            errors.append("EMAIL_PROVIDERS não configurado")
        if not self.from_email:
            errors.append("EMAIL_FROM não configurado")
        if "smtp" in self.providers and not self.smtp_host:
            errors.append("EMAIL_PROVIDERS=smtp requer EMAIL_HOST")
        if "resend" in self.providers and not self.resend_api_key:
            errors.append("EMAIL_PROVIDERS=resend requer RESEND_API_KEY")
        return errors


def _parse_providers(raw: str) -> tuple[str, ...]:
    return tuple(p.strip().lower() for p in raw.split(",") if p.strip())


def _load_from_env() -> EmailSettings:
    """Carrega EmailSettings de variáveis de ambiente."""
    smtp_user = os.getenv("EMAIL_USER", "")
    return EmailSettings(
        providers=_parse_providers(os.getenv("EMAIL_PROVIDERS", "smtp")),
        from_email=os.getenv("EMAIL_FROM", smtp_user),
        from_name=os.getenv("EMAIL_FROM_NAME", "Loja"),
        fallback_from_email=os.getenv("EMAIL_FALLBACK_FROM", ""),
        operator_email=os.getenv("EMAIL_TO", ""),
        smtp_host=os.getenv("EMAIL_HOST", ""),
        smtp_port=int(os.getenv("EMAIL_PORT", "587")),
        smtp_username=smtp_user,
        smtp_password=os.getenv("EMAIL_PASS", ""),
        smtp_use_ssl=os.getenv("EMAIL_SECURE", "false").lower() in ("true", "1"),
        resend_api_key=os.getenv("RESEND_API_KEY", ""),
        resend_api_url=os.getenv("RESEND_API_URL", RESEND_API_URL),
        request_timeout_seconds=float(os.getenv("EMAIL_REQUEST_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_email_settings() -> EmailSettings:
    """Retorna instância cacheada de EmailSettings."""
    return _load_from_env()
