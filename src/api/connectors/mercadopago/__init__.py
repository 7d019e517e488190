"""Conector Mercado Pago (entrada de webhooks)."""
