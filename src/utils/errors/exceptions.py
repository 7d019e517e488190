"""Exceções de domínio para falhas recuperáveis de infraestrutura."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class DatabaseUnavailableError(InfrastructureError):
    """Falha de conexão/timeout ao acessar o banco de pedidos."""


class UpstreamServiceError(InfrastructureError):
    """Falha ao chamar serviço externo (gateway, transportadora, CEP, email).

    Args:
        service: Nome curto do serviço (ex: "mercadopago").
        message: Descrição sem dados sensíveis.
        status_code: Status HTTP retornado, quando houver.
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code
