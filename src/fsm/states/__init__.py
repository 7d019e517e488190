"""
Exports públicos do módulo fsm/states.

Estados canônicos do ciclo de vida do pedido.
"""

from fsm.states.order import (
    DEFAULT_INITIAL_STATE,
    OPEN_PAYMENT_STATES,
    TERMINAL_STATES,
    OrderStatus,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "OPEN_PAYMENT_STATES",
    "TERMINAL_STATES",
    "OrderStatus",
    "is_terminal",
    "is_valid_state",
]
