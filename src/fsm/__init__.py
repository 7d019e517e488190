"""
Módulo FSM — ciclo de vida de status do pedido.

A máquina não guarda estado em memória: o status vive na tabela de
pedidos e cada transição é aplicada por UPDATE condicional. Este módulo
define os estados, o grafo e os tipos de transição.

Estrutura:
    - states/: Definições dos estados (OrderStatus enum)
    - transitions/: Grafo de transições (VALID_TRANSITIONS, predecessors_of)
    - types/: Tipos de dados (StatusTransition)
"""

from fsm.states import (
    DEFAULT_INITIAL_STATE,
    OPEN_PAYMENT_STATES,
    TERMINAL_STATES,
    OrderStatus,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    predecessors_of,
    validate_transition_map,
)
from fsm.types import StatusTransition

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "OPEN_PAYMENT_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "OrderStatus",
    "StatusTransition",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "predecessors_of",
    "validate_transition_map",
]
