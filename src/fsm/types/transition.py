"""
Tipos para transições condicionais de status.

Uma transição não guarda o status de origem observado: ela declara o
destino e o conjunto de origens aceitas, e o banco decide (via UPDATE
condicional) se ela foi aplicada.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.order import OrderStatus
from fsm.transitions.rules import predecessors_of


@dataclass(frozen=True, slots=True)
class StatusTransition:
    """
    Pedido de transição condicional de um pedido.

    Attributes:
        order_id: Pedido alvo
        to_state: Status de destino
        allowed_from: Status atuais aceitos (cláusula WHERE status IN ...)
        trigger: Gatilho (ex: 'payment_webhook', 'expiry_sweep')
        metadata: Dados adicionais para auditoria (nunca PII)
        timestamp: Momento da tentativa (UTC)
    """

    order_id: int
    to_state: OrderStatus
    allowed_from: frozenset[OrderStatus]
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Valida invariantes do objeto após inicialização."""
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")
        if not self.allowed_from:
            raise ValueError(f"{self.to_state.name} não possui predecessores")
        if self.to_state in self.allowed_from:
            raise ValueError("allowed_from não pode conter o próprio destino")

    @classmethod
    def to_target(
        cls,
        order_id: int,
        to_state: OrderStatus,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> "StatusTransition":
        """Cria transição com predecessores derivados do grafo."""
        return cls(
            order_id=order_id,
            to_state=to_state,
            allowed_from=predecessors_of(to_state),
            trigger=trigger,
            metadata=metadata or {},
        )

    def to_log_dict(self) -> dict[str, Any]:
        """
        Retorna representação segura para logs (sem PII).

        Returns:
            Dict com dados seguros para logging estruturado
        """
        return {
            "order_id": self.order_id,
            "to_state": self.to_state.name,
            "allowed_from": sorted(s.name for s in self.allowed_from),
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }

