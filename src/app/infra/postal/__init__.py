"""Fontes de consulta de CEP."""

from app.infra.postal.cep_lookup import BrasilApiSource, ViaCepSource

__all__ = [
    "BrasilApiSource",
    "ViaCepSource",
]
