"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    DatabaseUnavailableError,
    InfrastructureError,
    UpstreamServiceError,
)

__all__ = [
    "DatabaseUnavailableError",
    "InfrastructureError",
    "UpstreamServiceError",
]
