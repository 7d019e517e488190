"""Provedor de email via SMTP.

smtplib é bloqueante; o envio roda em worker thread (asyncio.to_thread).
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING

from app.infra.mail.errors import MailDeliveryError, SenderIdentityError

if TYPE_CHECKING:
    from app.protocols.mail_provider import MailMessage
    from config.settings import EmailSettings

logger = logging.getLogger(__name__)


class SmtpMailProvider:
    """Envio por SMTP com STARTTLS (ou SSL direto na porta 465)."""

    name = "smtp"

    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.smtp_host and self._settings.smtp_username)

    async def send(self, message: MailMessage) -> str | None:
        await asyncio.to_thread(self._send_sync, _build_mime(message))
        return None

    def _send_sync(self, mime: EmailMessage) -> None:
        settings = self._settings
        timeout = settings.request_timeout_seconds
        try:
            if settings.smtp_use_ssl:
                server: smtplib.SMTP = smtplib.SMTP_SSL(
                    settings.smtp_host, settings.smtp_port, timeout=timeout
                )
            else:
                server = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=timeout)
            with server:
                if not settings.smtp_use_ssl:
                    server.starttls()
                if settings.smtp_username and settings.smtp_password:
                    server.login(settings.smtp_username, settings.smtp_password)
                server.send_message(mime)
        except smtplib.SMTPSenderRefused as exc:
            raise SenderIdentityError(self.name, "smtp_sender_refused", exc.smtp_code) from exc
        except smtplib.SMTPResponseException as exc:
            raise MailDeliveryError(self.name, "smtp_error_response", exc.smtp_code) from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(self.name, f"smtp_failure:{type(exc).__name__}") from exc


def _build_mime(message: MailMessage) -> EmailMessage:
    mime = EmailMessage()
    mime["Subject"] = message.subject
    mime["From"] = message.sender
    mime["To"] = ", ".join(message.to)
    if message.bcc:
        # send_message usa Bcc como destinatário e remove o cabeçalho antes de enviar
        mime["Bcc"] = ", ".join(message.bcc)
    mime.set_content("Este email requer um cliente com suporte a HTML.")
    mime.add_alternative(message.html, subtype="html")
    return mime
