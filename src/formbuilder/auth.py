from __future__ import annotations

import logging
from typing import Protocol

import jwt
from fastapi import Request

from formbuilder.config import Settings
from formbuilder.errors import Unauthorized

logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    def authenticate(self, request: Request) -> str: ...


def bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthorized("No token, authorization denied")
    return parts[1]


class JWTAuthProvider:
    """Verifies ``Authorization: Bearer <jwt>`` signed with a shared secret.

    The caller identity is the ``sub`` claim, or ``userId`` for tokens issued
    by the older auth service.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def authenticate(self, request: Request) -> str:
        token = bearer_token(request)
        if not self._secret:
            raise Unauthorized("Token is not valid")
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise Unauthorized("Token is not valid")
        owner_id = claims.get("sub") or claims.get("userId")
        if not owner_id:
            raise Unauthorized("Token is not valid")
        return str(owner_id)


class HeaderAuthProvider:
    """Trusts an ``X-User-Id`` header set by an authenticating gateway.

    Any client that can reach the app directly can claim any identity, so the
    gateway must drop a client-supplied ``X-User-Id`` before forwarding.
    """

    def authenticate(self, request: Request) -> str:
        owner_id = request.headers.get("x-user-id", "").strip()
        if not owner_id:
            raise Unauthorized()
        return owner_id


def get_auth_provider(settings: Settings) -> AuthProvider:
    if settings.auth_mode == "header":
        logger.warning(
            "AUTH_MODE=header trusts X-User-Id from any caller; "
            "the gateway in front must strip it from client requests"
        )
        return HeaderAuthProvider()
    return JWTAuthProvider(settings.jwt_secret, settings.jwt_algorithm)


def current_owner(request: Request) -> str:
    return request.app.state.auth_provider.authenticate(request)
