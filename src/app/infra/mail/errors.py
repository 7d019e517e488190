"""Erros de envio de email."""

from __future__ import annotations

from utils.errors import UpstreamServiceError


class MailDeliveryError(UpstreamServiceError):
    """Provedor recusou ou não conseguiu entregar a mensagem."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        super().__init__(provider, message, status_code)
        self.provider = provider


class SenderIdentityError(MailDeliveryError):
    """Remetente não verificado/recusado pelo provedor."""
