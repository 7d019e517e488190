"""Connectors por integração — verificação e decodificação de webhooks.

Estrutura:
- mercadopago/: notificações de pagamento (x-signature)
- melhor_envio/: eventos de rastreio (X-ME-Signature)

Cada integração tem seu próprio connector, garantindo isolamento de falhas.
"""

__all__: list[str] = []
