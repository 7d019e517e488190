"""Rotas de pedidos (expiração e consulta)."""
