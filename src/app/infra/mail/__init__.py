"""Provedores de email transacional."""

from app.infra.mail.errors import MailDeliveryError, SenderIdentityError
from app.infra.mail.resend_provider import ResendMailProvider
from app.infra.mail.smtp_provider import SmtpMailProvider

__all__ = [
    "MailDeliveryError",
    "ResendMailProvider",
    "SenderIdentityError",
    "SmtpMailProvider",
]
