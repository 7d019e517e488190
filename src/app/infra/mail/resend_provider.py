"""Provedor de email via API HTTP do Resend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpClientConfig, HttpError
from app.infra.mail.errors import MailDeliveryError, SenderIdentityError

if TYPE_CHECKING:
    import httpx

    from app.protocols.mail_provider import MailMessage
    from config.settings import EmailSettings

logger = logging.getLogger(__name__)

# Termos que o Resend usa ao recusar remetente/domínio não verificado
_SENDER_HINTS = (
    "domain is not verified",
    "`from` field",
    "from field",
    "invalid sender",
    "sender address",
)


class ResendMailProvider:
    """Envio via POST https://api.resend.com/emails."""

    name = "resend"

    def __init__(
        self,
        settings: EmailSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._http = HttpClient(
            HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=1,
                default_headers={"Authorization": f"Bearer {settings.resend_api_key}"},
            ),
            service=self.name,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.resend_api_key)

    async def send(self, message: MailMessage) -> str | None:
        payload: dict[str, Any] = {
            "from": message.sender,
            "to": list(message.to),
            "subject": message.subject,
            "html": message.html,
        }
        if message.bcc:
            payload["bcc"] = list(message.bcc)

        try:
            response = await self._http.post(self._settings.resend_api_url, json=payload)
        except HttpError as exc:
            raise MailDeliveryError(self.name, str(exc), exc.status_code) from exc

        if response.status_code >= 400:
            error_message = _error_message(response)
            if _is_sender_rejection(response.status_code, error_message):
                raise SenderIdentityError(self.name, "resend_sender_rejected", response.status_code)
            logger.warning(
                "resend_rejected",
                extra={"status_code": response.status_code, "error": error_message},
            )
            raise MailDeliveryError(self.name, "resend_rejected", response.status_code)

        try:
            return str(response.json().get("id") or "") or None
        except (ValueError, AttributeError):
            return None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("name") or "")
    return ""


def _is_sender_rejection(status_code: int, error_message: str) -> bool:
    if status_code not in (403, 422):
        return False
    lowered = error_message.lower()
    return any(hint in lowered for hint in _SENDER_HINTS)
