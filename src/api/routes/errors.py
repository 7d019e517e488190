"""Tradução de erros de validação para 400 com mensagem genérica.

O FastAPI responde 422 por padrão; o frontend da loja espera 400 com
`{"error": "<mensagem>"}`. Detalhes do pydantic vão só para o log.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

DEFAULT_VALIDATION_MESSAGE = "Dados inválidos."
VALIDATION_MESSAGES: dict[str, str] = {
    "/criar-preferencia": "Dados incompletos para criar a preferência.",
    "/calcular-frete": "CEP de destino e lista de itens são obrigatórios.",
    "/rastrear-pedido": "Informe o e-mail e o CPF ou o código de rastreio.",
}


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()})
    logger.info(
        "request_validation_failed",
        extra={"path": request.url.path, "fields": fields},
    )
    message = VALIDATION_MESSAGES.get(request.url.path, DEFAULT_VALIDATION_MESSAGE)
    return error_response(message, status.HTTP_400_BAD_REQUEST)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
