"""Tipos de notificação ao cliente e resultado de efeitos colaterais."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class NotificationType(StrEnum):
    """Emails transacionais disparados pelo ciclo do pedido."""

    CONFIRMATION = "confirmation"
    TRACKING = "tracking"
    EXPIRY = "expiry"


@dataclass(frozen=True, slots=True)
class SideEffectResult:
    """Resultado de um efeito colateral (email, reserva na transportadora).

    Falhas viram resultado, nunca exceção: um efeito colateral não
    desfaz uma transição já gravada.
    """

    name: str
    success: bool
    skipped: bool = False
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, name: str, **details: Any) -> SideEffectResult:
        return cls(name=name, success=True, details=details)

    @classmethod
    def failed(cls, name: str, error: str, **details: Any) -> SideEffectResult:
        return cls(name=name, success=False, error=error, details=details)

    @classmethod
    def skip(cls, name: str, reason: str) -> SideEffectResult:
        return cls(name=name, success=True, skipped=True, details={"reason": reason})
