"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests da loja e webhooks (Mercado Pago, Melhor Envio)
- Validar assinaturas e decodificar notificações
- Traduzir erros de domínio em respostas HTTP

Subpastas:
- connectors/: verificação de assinatura e decodificação por integração
- routes/: endpoints HTTP (checkout, webhooks, pedidos, health)

NÃO PODE conter: regras de transição de status, acesso direto ao banco.
"""
