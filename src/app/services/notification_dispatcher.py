"""Dispatcher de emails transacionais do pedido.

Escolhe o primeiro provedor configurado (na ordem de EMAIL_PROVIDERS).
Remetente recusado gera exatamente uma nova tentativa com o remetente
alternativo verificado; outras falhas não são repetidas. Falhas viram
SideEffectResult e nunca são propagadas.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.notifications import NotificationType, SideEffectResult
from app.infra.mail.errors import MailDeliveryError, SenderIdentityError
from app.observability import record_side_effect
from app.protocols.mail_provider import MailMessage
from app.services.email_templates import render

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.order import Order
    from app.protocols.mail_provider import MailProviderProtocol
    from config.settings import EmailSettings

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Renderiza e envia emails de confirmação, rastreio e expiração."""

    def __init__(
        self,
        settings: EmailSettings,
        providers: Sequence[MailProviderProtocol],
    ) -> None:
        self._settings = settings
        self._providers = list(providers)

    @property
    def provider(self) -> MailProviderProtocol | None:
        """Primeiro provedor configurado, ou None."""
        for provider in self._providers:
            if getattr(provider, "is_configured", True):
                return provider
        return None

    async def send(self, order: Order, kind: NotificationType) -> SideEffectResult:
        effect = f"email_{kind.value}"
        provider = self.provider
        if provider is None:
            logger.warning("email_provider_not_configured", extra={"order_id": order.id})
            result = SideEffectResult.failed(effect, "no_provider_configured")
            record_side_effect(effect, order.id, success=False)
            return result

        message = self._build_message(order, kind)
        try:
            result = await self._deliver(provider, message, order, effect)
        except MailDeliveryError as exc:
            logger.error(
                "email_send_failed",
                extra={
                    "order_id": order.id,
                    "notification": kind.value,
                    "provider": provider.name,
                    "error_type": type(exc).__name__,
                    "status_code": exc.status_code,
                },
            )
            result = SideEffectResult.failed(effect, type(exc).__name__, provider=provider.name)

        record_side_effect(effect, order.id, success=result.success)
        return result

    async def _deliver(
        self,
        provider: MailProviderProtocol,
        message: MailMessage,
        order: Order,
        effect: str,
    ) -> SideEffectResult:
        try:
            message_id = await provider.send(message)
        except SenderIdentityError:
            fallback = self._settings.formatted_fallback_from
            if not fallback:
                raise
            logger.warning(
                "email_sender_rejected_retrying_fallback",
                extra={"order_id": order.id, "provider": provider.name},
            )
            message_id = await provider.send(message.with_sender(fallback))
            logger.info("email_sent", extra={"order_id": order.id, "provider": provider.name})
            return SideEffectResult.ok(
                effect,
                provider=provider.name,
                message_id=message_id,
                used_fallback_sender=True,
            )

        logger.info("email_sent", extra={"order_id": order.id, "provider": provider.name})
        return SideEffectResult.ok(effect, provider=provider.name, message_id=message_id)

    def _build_message(self, order: Order, kind: NotificationType) -> MailMessage:
        rendered = render(kind, order, self._settings.from_name)
        bcc: tuple[str, ...] = ()
        if kind is NotificationType.CONFIRMATION and self._settings.operator_email:
            bcc = (self._settings.operator_email,)
        return MailMessage(
            sender=self._settings.formatted_from,
            to=(order.customer_email,),
            subject=rendered.subject,
            html=rendered.html,
            bcc=bcc,
        )
