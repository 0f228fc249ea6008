"""
Exception Handlers globais para o FastAPI.

Centraliza o tratamento das exceções PortalError, violações de integridade
do banco e erros genéricos, garantindo respostas JSON padronizadas sem
vazamento de stack traces.
"""

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from portal.config.exceptions import PortalError

logger = logging.getLogger("server")

_DETAIL_ATTRS = ("field", "resource", "identifier", "service")


def _error_response(status_code: int, code: str, message: str,
                    details: Optional[dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            },
        },
    )


async def portal_exception_handler(request: Request, exc: PortalError) -> JSONResponse:
    """
    Handler global para todas as exceções PortalError e subclasses.

    Converte exceções tipadas em respostas JSON padronizadas com:
    - success: false
    - error.code: Código programático (ex: "VALIDATION_ERROR")
    - error.message: Mensagem legível para o usuário
    - error.details: Informações adicionais (opcional)
    """
    status_code = getattr(exc, "status_code", 500)

    if status_code >= 500:
        logger.error(f"[{exc.code}] {exc.message} - Path: {request.url.path}")
    else:
        logger.warning(f"[{exc.code}] {exc.message} - Path: {request.url.path}")

    details = {}
    for attr in _DETAIL_ATTRS:
        value = getattr(exc, attr, None)
        if value is not None:
            details[attr] = value

    return _error_response(status_code, exc.code, exc.message, details)


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Violação de unicidade/FK que escapou das validações do service."""
    logger.warning(f"[CONFLICT] IntegrityError - Path: {request.url.path}: {exc.orig}")
    return _error_response(
        409,
        "CONFLICT",
        "Registro conflita com dados existentes.",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler de fallback para exceções não tratadas.

    Captura qualquer Exception não prevista e retorna uma resposta genérica
    sem vazar detalhes internos (stack traces, paths, etc.).
    """
    logger.exception(f"Unhandled exception on {request.url.path}: {exc}")

    return _error_response(
        500,
        "INTERNAL_ERROR",
        "Erro interno do servidor. Tente novamente.",
    )
