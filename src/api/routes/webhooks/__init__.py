"""Rotas de webhooks (pagamento e transportadora)."""
