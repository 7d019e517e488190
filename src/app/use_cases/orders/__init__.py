"""Use cases do ciclo do pedido."""

from .create_checkout import CheckoutError, CreateCheckoutUseCase
from .expire_orders import ExpireOrdersUseCase
from .lookup_order import LookupOrderUseCase, OrderNotFoundError
from .outcomes import ExpirySweepResult, OutcomeKind, ReconciliationOutcome
from .quote_shipping import QuoteShippingUseCase
from .reconcile_payment import ReconcilePaymentUseCase, classify_payment
from .record_tracking import RecordTrackingUseCase

__all__ = [
    # Checkout
    "CheckoutError",
    "CreateCheckoutUseCase",
    "QuoteShippingUseCase",
    # Webhooks
    "ReconcilePaymentUseCase",
    "RecordTrackingUseCase",
    "classify_payment",
    # Cron
    "ExpireOrdersUseCase",
    # Consulta
    "LookupOrderUseCase",
    "OrderNotFoundError",
    # Resultados
    "ExpirySweepResult",
    "OutcomeKind",
    "ReconciliationOutcome",
]
