"""
Exports públicos do módulo fsm/types.

Tipos de transição condicional de status.
"""

from fsm.types.transition import StatusTransition

__all__ = [
    "StatusTransition",
]
