"""Testes do provedor SMTP com servidor falso."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage

import pytest

from app.infra.mail import MailDeliveryError, SenderIdentityError, SmtpMailProvider
from app.infra.mail import smtp_provider
from app.protocols.mail_provider import MailMessage
from config.settings import EmailSettings

SETTINGS = EmailSettings(
    from_email="loja@example.com",
    smtp_host="smtp.example.com",
    smtp_username="loja@example.com",
    smtp_password="secret",
)

MESSAGE = MailMessage(
    sender='"Loja" <loja@example.com>',
    to=("cliente@example.com",),
    subject="Pedido",
    html="<p>Olá</p>",
    bcc=("ops@example.com",),
)


class _FakeSmtp:
    instances: list[_FakeSmtp] = []
    error: Exception | None = None

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in: tuple[str, str] | None = None
        self.messages: list[EmailMessage] = []
        _FakeSmtp.instances.append(self)

    def __enter__(self) -> _FakeSmtp:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def starttls(self) -> None:
        self.started_tls = True

    def login(self, user: str, password: str) -> None:
        self.logged_in = (user, password)

    def send_message(self, message: EmailMessage) -> None:
        if _FakeSmtp.error is not None:
            raise _FakeSmtp.error
        self.messages.append(message)


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch: pytest.MonkeyPatch) -> type[_FakeSmtp]:
    _FakeSmtp.instances = []
    _FakeSmtp.error = None
    monkeypatch.setattr(smtp_provider.smtplib, "SMTP", _FakeSmtp)
    return _FakeSmtp


@pytest.mark.asyncio
async def test_send_uses_starttls_and_login(fake_smtp: type[_FakeSmtp]) -> None:
    await SmtpMailProvider(SETTINGS).send(MESSAGE)

    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.started_tls is True
    assert server.logged_in == ("loja@example.com", "secret")
    sent = server.messages[0]
    assert sent["To"] == "cliente@example.com"
    assert sent["Bcc"] == "ops@example.com"


@pytest.mark.asyncio
async def test_sender_refused_maps_to_identity_error(fake_smtp: type[_FakeSmtp]) -> None:
    fake_smtp.error = smtplib.SMTPSenderRefused(553, b"not allowed", "loja@example.com")

    with pytest.raises(SenderIdentityError):
        await SmtpMailProvider(SETTINGS).send(MESSAGE)


@pytest.mark.asyncio
async def test_connection_failure_maps_to_delivery_error(fake_smtp: type[_FakeSmtp]) -> None:
    fake_smtp.error = OSError("connection reset")

    with pytest.raises(MailDeliveryError, match="smtp_failure:OSError"):
        await SmtpMailProvider(SETTINGS).send(MESSAGE)


def test_is_configured_requires_host_and_user() -> None:
    assert SmtpMailProvider(SETTINGS).is_configured is True
    assert SmtpMailProvider(EmailSettings()).is_configured is False
