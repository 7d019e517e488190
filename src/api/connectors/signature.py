"""Resultado de verificação de assinatura de webhook (compartilhado)."""

from __future__ import annotations

import hmac
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação.

    Attributes:
        valid: True se aceita (inclusive quando a verificação foi pulada)
        skipped: True quando não há secret configurado
        error: Código da falha (missing_signature, signature_mismatch, ...)
    """

    valid: bool
    skipped: bool = False
    error: str | None = None

    @classmethod
    def ok(cls) -> SignatureResult:
        return cls(valid=True)

    @classmethod
    def skip(cls) -> SignatureResult:
        return cls(valid=True, skipped=True)

    @classmethod
    def fail(cls, error: str) -> SignatureResult:
        return cls(valid=False, error=error)


def digests_match(expected: str, received: str) -> bool:
    """Comparação em tempo constante."""
    return hmac.compare_digest(expected.encode(), received.encode())
