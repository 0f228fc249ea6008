"""
Middleware de sessão: identifica a conta autenticada em cada requisição.

Este middleware:
1. Processa apenas rotas da API (/api/*)
2. Lê o token de sessão (Authorization: Bearer ou cookie)
3. Valida e decodifica o JWT HS256 emitido no login
4. Publica o Principal no contextvar e em request.state

A rejeição de requisições sem sessão fica com as dependências das rotas;
rotas públicas (memorial por slug, dedicatórias, webhooks) seguem sem conta.
"""

import hashlib
import logging
import secrets
import time
from contextvars import ContextVar
from typing import Any, Optional

import jwt
from starlette.requests import cookie_parser

from portal.config.constants import AccountType
from portal.config.settings import settings
from portal.domain.models import Principal, parse_subject

logger = logging.getLogger("middleware.session")

_JWT_ALGORITHM = "HS256"
_JWT_ISSUER = "portal-da-lembranca"

_principal_ctx: ContextVar[Optional[Principal]] = ContextVar("principal", default=None)

# Chave efêmera usada quando AUTH__SECRET_KEY não foi configurada (apenas dev)
_ephemeral_secret: Optional[str] = None


def _current_signing_key() -> str:
    global _ephemeral_secret
    if settings.auth.secret_key:
        return settings.auth.secret_key
    if _ephemeral_secret is None:
        _ephemeral_secret = secrets.token_urlsafe(48)
        logger.warning(
            "AUTH__SECRET_KEY ausente: usando chave efêmera; sessões expiram ao reiniciar"
        )
    return _ephemeral_secret


def _verification_keys() -> list[str]:
    keys = [_current_signing_key()]
    previous = settings.auth.secret_key_previous
    if previous and previous not in keys:
        keys.append(previous)
    return keys


def session_ttl_seconds(account_type: AccountType) -> int:
    if account_type == AccountType.ADMIN:
        return settings.auth.admin_session_ttl_hours * 3600
    return settings.auth.session_ttl_days * 86400


def create_session_token(principal: Principal, now: Optional[float] = None) -> str:
    """Emite o token de sessão assinado para a conta."""
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": principal.subject,
        "type": principal.account_type.value,
        "name": principal.name,
        "email": principal.email,
        "iss": _JWT_ISSUER,
        "iat": issued_at,
        "exp": issued_at + session_ttl_seconds(principal.account_type),
    }
    return jwt.encode(payload, _current_signing_key(), algorithm=_JWT_ALGORITHM)


def _token_fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


def decode_session_token(token: Optional[str]) -> Optional[Principal]:
    """
    Valida assinatura, emissor e expiração do token.

    Returns:
        Principal ou None se inválido/expirado.
    """
    if not token:
        return None

    payload = None
    for key in _verification_keys():
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[_JWT_ALGORITHM],
                issuer=_JWT_ISSUER,
                options={"require": ["sub", "exp", "iat"]},
            )
            break
        except jwt.InvalidSignatureError:
            continue
        except jwt.PyJWTError as e:
            logger.debug("Token de sessão rejeitado (%s): %s", _token_fingerprint(token), e)
            return None

    if payload is None:
        logger.debug("Token de sessão com assinatura inválida (%s)", _token_fingerprint(token))
        return None

    parsed = parse_subject(payload.get("sub"))
    if parsed is None:
        logger.debug("Token de sessão com sub inválido (%s)", _token_fingerprint(token))
        return None
    account_type, account_id = parsed
    if payload.get("type") != account_type.value:
        return None

    return Principal(
        account_type=account_type,
        account_id=account_id,
        name=str(payload.get("name") or ""),
        email=str(payload.get("email") or ""),
    )


class SessionMiddleware:
    """
    Middleware ASGI puro para resolver a sessão da requisição.

    Pure ASGI em vez de BaseHTTPMiddleware: não bufferiza a resposta e
    mantém o contextvar visível dentro do handler.
    """

    def __init__(self, app):
        self.app = app

    @staticmethod
    def _extract_token(scope: dict[str, Any]) -> Optional[str]:
        headers = dict(scope.get("headers", []))
        auth_header = headers.get(b"authorization", b"").decode("latin-1")
        if auth_header.lower().startswith("bearer "):
            token = auth_header[7:].strip()
            if token:
                return token

        cookie_header = headers.get(b"cookie", b"").decode("latin-1")
        if not cookie_header:
            return None
        token = cookie_parser(cookie_header).get(settings.auth.session_cookie_name, "").strip()
        return token or None

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or not scope.get("path", "").startswith("/api"):
            await self.app(scope, receive, send)
            return

        principal = decode_session_token(self._extract_token(scope))
        scope.setdefault("state", {})["principal"] = principal
        if principal is not None:
            logger.debug(
                "Request %s %s - Conta: %s",
                scope.get("method", "?"),
                scope.get("path", ""),
                principal.subject,
            )

        token_var = _principal_ctx.set(principal)
        try:
            await self.app(scope, receive, send)
        finally:
            _principal_ctx.reset(token_var)


def get_current_principal() -> Optional[Principal]:
    """
    Conta autenticada da requisição atual, em qualquer ponto do código.

    Uso:
        from portal.server.middleware import get_current_principal
        principal = get_current_principal()
    """
    return _principal_ctx.get()
