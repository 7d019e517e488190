"""
Estados canônicos do ciclo de vida de um pedido.

O status é o único campo sobre o qual gira o controle de concorrência:
toda mudança é um UPDATE condicionado ao status atual.
"""

from enum import StrEnum


class OrderStatus(StrEnum):
    """
    Estados de um pedido.

    Os valores persistidos seguem a nomenclatura usada pela loja
    (coluna `status` da tabela `pedidos`).

    Estados não-terminais:
        - AWAITING_PAYMENT: Pedido criado no checkout, aguardando pagamento
        - PAYMENT_PENDING: Gateway informou pagamento ainda não aprovado
        - IN_PRODUCTION: Pagamento aprovado; não aceita mais eventos de pagamento

    Estados terminais:
        - SHIPPED: Postado na transportadora (código de rastreio registrado)
        - CANCELLED_EXPIRED: Janela de pagamento expirou sem aprovação
    """

    AWAITING_PAYMENT = "AGUARDANDO_PAGAMENTO"
    PAYMENT_PENDING = "PAGAMENTO_PENDENTE"
    IN_PRODUCTION = "EM_PRODUCAO"
    SHIPPED = "ENVIADO"
    CANCELLED_EXPIRED = "CANCELADO_POR_EXPIRACAO"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, o pedido não transita mais
TERMINAL_STATES: frozenset[OrderStatus] = frozenset({
    OrderStatus.SHIPPED,
    OrderStatus.CANCELLED_EXPIRED,
})

# Estados em que o pedido ainda aguarda pagamento (alvo da varredura de expiração)
OPEN_PAYMENT_STATES: frozenset[OrderStatus] = frozenset({
    OrderStatus.AWAITING_PAYMENT,
    OrderStatus.PAYMENT_PENDING,
})

# Estado de todo pedido recém-criado
DEFAULT_INITIAL_STATE: OrderStatus = OrderStatus.AWAITING_PAYMENT


def is_terminal(state: OrderStatus) -> bool:
    """
    Verifica se o estado é terminal.

    Args:
        state: Estado a ser verificado

    Returns:
        True se o estado é terminal, False caso contrário
    """
    return state in TERMINAL_STATES


def is_valid_state(state: object) -> bool:
    """Verifica se o valor é um OrderStatus válido."""
    return isinstance(state, OrderStatus)
