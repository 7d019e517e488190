"""Protocolo de provedor de email transacional."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class MailMessage:
    """Mensagem pronta para envio (HTML)."""

    sender: str
    to: tuple[str, ...]
    subject: str
    html: str
    bcc: tuple[str, ...] = field(default_factory=tuple)

    def with_sender(self, sender: str) -> MailMessage:
        return MailMessage(
            sender=sender,
            to=self.to,
            subject=self.subject,
            html=self.html,
            bcc=self.bcc,
        )


class MailProviderProtocol(Protocol):
    """Contrato mínimo de provedor de email.

    Deve levantar SenderIdentityError quando o remetente for recusado e
    MailDeliveryError para demais falhas.
    """

    name: str

    async def send(self, message: MailMessage) -> str | None:
        """Envia a mensagem e retorna o id do provedor, se houver."""
        ...
