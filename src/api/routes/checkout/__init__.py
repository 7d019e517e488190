"""Rotas do checkout."""
