"""Composition root: conecta implementações concretas aos use cases.

Cada componente recebe no construtor a seção de `AppConfig` que usa.
Testes substituem store, gateway, transportadora, email e CEP por fakes
via os parâmetros de `build_container`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_database_engine
from app.infra.mail import ResendMailProvider, SmtpMailProvider
from app.infra.payments import MercadoPagoClient
from app.infra.postal import BrasilApiSource, ViaCepSource
from app.infra.shipping import MelhorEnvioClient
from app.infra.stores import SqlOrderStore
from app.services import CarrierBookingService, NotificationDispatcher, PostalLookupService
from app.use_cases.orders import (
    CreateCheckoutUseCase,
    ExpireOrdersUseCase,
    LookupOrderUseCase,
    QuoteShippingUseCase,
    ReconcilePaymentUseCase,
    RecordTrackingUseCase,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncEngine

    from app.protocols import (
        CarrierClientProtocol,
        MailProviderProtocol,
        OrderStoreProtocol,
        PaymentGatewayProtocol,
        PostalSourceProtocol,
    )
    from config.settings import AppConfig, EmailSettings

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Componentes prontos para as rotas (em `app.state.container`)."""

    config: AppConfig
    store: OrderStoreProtocol
    dispatcher: NotificationDispatcher
    create_checkout: CreateCheckoutUseCase
    quote_shipping: QuoteShippingUseCase
    reconcile_payment: ReconcilePaymentUseCase
    record_tracking: RecordTrackingUseCase
    expire_orders: ExpireOrdersUseCase
    lookup_order: LookupOrderUseCase
    engine: AsyncEngine | None = None

    async def startup(self) -> None:
        """Cria o schema em development (produção usa migração própria)."""
        if isinstance(self.store, SqlOrderStore) and self.config.base.is_development:
            await self.store.create_schema()
            logger.info("database_schema_ready")

    async def aclose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("database_engine_disposed")


def _mail_providers(settings: EmailSettings) -> list[MailProviderProtocol]:
    factories = {"smtp": SmtpMailProvider, "resend": ResendMailProvider}
    return [factories[name](settings) for name in settings.providers if name in factories]


def build_container(
    config: AppConfig,
    *,
    store: OrderStoreProtocol | None = None,
    gateway: PaymentGatewayProtocol | None = None,
    carrier_client: CarrierClientProtocol | None = None,
    mail_providers: Sequence[MailProviderProtocol] | None = None,
    postal_sources: Sequence[PostalSourceProtocol] | None = None,
) -> Container:
    """Monta o grafo de dependências a partir da configuração."""
    engine: AsyncEngine | None = None
    if store is None:
        engine = create_database_engine(config.base.database_url, echo=config.base.debug)
        store = SqlOrderStore(engine)

    gateway = gateway or MercadoPagoClient(config.mercadopago)
    carrier_client = carrier_client or MelhorEnvioClient(config.melhor_envio)
    if mail_providers is None:
        mail_providers = _mail_providers(config.email)
    if postal_sources is None:
        postal_sources = [ViaCepSource(config.postal), BrasilApiSource(config.postal)]

    dispatcher = NotificationDispatcher(config.email, mail_providers)
    booking = CarrierBookingService(carrier_client, store, config.melhor_envio)
    postal = PostalLookupService(postal_sources)

    return Container(
        config=config,
        store=store,
        dispatcher=dispatcher,
        create_checkout=CreateCheckoutUseCase(store, gateway, config.base),
        quote_shipping=QuoteShippingUseCase(postal, carrier_client, config.melhor_envio),
        reconcile_payment=ReconcilePaymentUseCase(gateway, store, dispatcher, booking),
        record_tracking=RecordTrackingUseCase(store, dispatcher),
        expire_orders=ExpireOrdersUseCase(store, dispatcher),
        lookup_order=LookupOrderUseCase(store),
        engine=engine,
    )
