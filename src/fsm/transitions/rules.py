"""
Grafo de transições válidas entre status de pedido.

O conjunto de predecessores de cada status alvo é derivado deste grafo
e vira a cláusula `status IN (...)` do UPDATE condicional.
"""

from fsm.states.order import TERMINAL_STATES, OrderStatus

TransitionMap = dict[OrderStatus, frozenset[OrderStatus]]

# Chave: status de origem
# Valor: status de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # Pedido novo: qualquer notificação de pagamento ou expiração
    OrderStatus.AWAITING_PAYMENT: frozenset({
        OrderStatus.PAYMENT_PENDING,
        OrderStatus.IN_PRODUCTION,
        OrderStatus.CANCELLED_EXPIRED,
    }),

    # Pendente não é regravado como pendente
    OrderStatus.PAYMENT_PENDING: frozenset({
        OrderStatus.IN_PRODUCTION,
        OrderStatus.CANCELLED_EXPIRED,
    }),

    # Aprovado: só sai com o rastreio da transportadora
    OrderStatus.IN_PRODUCTION: frozenset({
        OrderStatus.SHIPPED,
    }),

    OrderStatus.SHIPPED: frozenset(),
    OrderStatus.CANCELLED_EXPIRED: frozenset(),
}


def get_valid_targets(state: OrderStatus) -> frozenset[OrderStatus]:
    """
    Retorna os status de destino válidos para um status de origem.

    Args:
        state: Status de origem

    Returns:
        Conjunto de status de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: OrderStatus, to_state: OrderStatus) -> bool:
    """Verifica se a transição from_state → to_state existe no grafo."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def predecessors_of(target: OrderStatus) -> frozenset[OrderStatus]:
    """
    Retorna os status a partir dos quais `target` é alcançável.

    Ex.: IN_PRODUCTION ← {AWAITING_PAYMENT, PAYMENT_PENDING}
         PAYMENT_PENDING ← {AWAITING_PAYMENT}

    Args:
        target: Status de destino

    Returns:
        Conjunto de predecessores (vazio para o estado inicial)
    """
    return frozenset(
        source for source, targets in VALID_TRANSITIONS.items() if target in targets
    )


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do grafo de transições.

    Verifica:
    - Todos os status do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Nenhum status transita para si mesmo

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in OrderStatus:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Status {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        if VALID_TRANSITIONS.get(state):
            errors.append(f"Status terminal {state.name} não deveria ter transições")

    for from_state, targets in VALID_TRANSITIONS.items():
        if from_state in targets:
            errors.append(f"Status {from_state.name} não pode transitar para si mesmo")

    return errors
