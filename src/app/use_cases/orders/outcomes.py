"""Resultados dos casos de uso de pedido (usados em logs, métricas e testes)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.notifications import SideEffectResult
    from fsm.states.order import OrderStatus


class OutcomeKind(StrEnum):
    TRANSITIONED = "transitioned"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"


@dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    """Resultado do processamento de um evento externo (pagamento ou rastreio).

    Attributes:
        kind: transitioned (venceu o UPDATE), duplicate (0 linhas) ou ignored
        order_id: Pedido referenciado, se identificado
        target_status: Status pretendido, se calculado
        reason: Motivo para ignored/duplicate
        side_effects: Resultados dos efeitos disparados (só em transitioned)
    """

    kind: OutcomeKind
    order_id: int | None = None
    target_status: OrderStatus | None = None
    reason: str | None = None
    side_effects: tuple[SideEffectResult, ...] = field(default_factory=tuple)

    @property
    def transitioned(self) -> bool:
        return self.kind is OutcomeKind.TRANSITIONED

    @classmethod
    def ignored(cls, reason: str, order_id: int | None = None) -> ReconciliationOutcome:
        return cls(kind=OutcomeKind.IGNORED, order_id=order_id, reason=reason)


@dataclass(frozen=True, slots=True)
class ExpirySweepResult:
    """Contagens de uma varredura de expiração."""

    scanned: int = 0
    expired: int = 0
    skipped: int = 0
    email_failures: int = 0
    store_failures: int = 0
    expired_order_ids: tuple[int, ...] = ()

    def to_log_dict(self) -> dict[str, int]:
        return {
            "scanned": self.scanned,
            "expired": self.expired,
            "skipped": self.skipped,
            "email_failures": self.email_failures,
            "store_failures": self.store_failures,
        }
