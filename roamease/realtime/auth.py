"""Handshake authentication for Socket.IO connections.

A connection is accepted only once its bearer token verifies and resolves to
an active user. Each failure has its own reason string so the frontend can
tell "refresh your token" (``jwt_expired``) from "log in again".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import parse_qs

import jwt
from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.state import token_backend
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.utils import aware_utcnow
from rest_framework_simplejwt.utils import datetime_from_epoch

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class RejectReason(StrEnum):
    TOKEN_MISSING = "token_missing"
    JWT_INVALID = "jwt_invalid"
    JWT_EXPIRED = "jwt_expired"
    USER_NOT_FOUND = "user_not_found"
    USER_INACTIVE = "user_inactive"
    SERVER_ERROR = "server_error"


class HandshakeRejectedError(Exception):
    def __init__(self, reason: RejectReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


@dataclass(frozen=True)
class ConnectionIdentity:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def as_session(self) -> dict[str, str]:
        return {"user_id": self.user_id, "role": self.role}

    @classmethod
    def from_session(cls, session: Any) -> ConnectionIdentity | None:
        if not isinstance(session, dict) or not session.get("user_id"):
            return None
        return cls(user_id=str(session["user_id"]), role=str(session.get("role", "")))


def _header(environ: dict[str, Any], scope: Any, name: str) -> str | None:
    value = environ.get("HTTP_" + name.upper().replace("-", "_"))
    if isinstance(value, str) and value:
        return value
    if isinstance(scope, dict):
        wanted = name.lower().encode()
        for key, raw in scope.get("headers") or ():
            if key.lower() == wanted:
                return raw.decode(errors="ignore")
    return None


def extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Pull the bearer token out of a Socket.IO handshake.

    Lookup order: ``auth: { token }``, then an ``Authorization: Bearer``
    header, then a ``?token=`` query parameter.
    """

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    # python-socketio passes different shapes depending on async mode:
    # - ASGI: a WSGI-style environ carrying the original scope in `asgi.scope`
    # - WSGI: `QUERY_STRING: str` and `HTTP_*` headers
    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner
    if not isinstance(environ, dict):
        return None

    authorization = _header(environ, scope, "Authorization")
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":  # noqa: PLR2004
            return parts[1]

    query_string: str | bytes = environ.get("QUERY_STRING", "")
    if not query_string and isinstance(scope, dict):
        query_string = scope.get("query_string", b"")
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token
    return None


def _is_expired(token: str) -> bool:
    """True only for a correctly signed access token whose ``exp`` has passed.

    The TokenError message does not tell expiry apart, so the token is decoded
    again with every check except expiry. A bad signature stays invalid.
    """

    try:
        payload = jwt.decode(
            token,
            token_backend.get_verifying_key(token),
            algorithms=[token_backend.algorithm],
            audience=token_backend.audience,
            issuer=token_backend.issuer,
            options={
                "verify_exp": False,
                "verify_aud": token_backend.audience is not None,
            },
        )
    except jwt.InvalidTokenError:
        return False
    if payload.get(api_settings.TOKEN_TYPE_CLAIM) != AccessToken.token_type:
        return False
    exp = payload.get("exp")
    return exp is not None and datetime_from_epoch(exp) <= aware_utcnow()


def verify_token(token: str) -> str:
    """Validate ``token`` and return the user id claim it carries."""

    try:
        validated = AccessToken(token)
    except TokenError as exc:
        # Frontend expects `jwt_expired` to trigger a token refresh.
        if _is_expired(token):
            raise HandshakeRejectedError(RejectReason.JWT_EXPIRED) from exc
        raise HandshakeRejectedError(RejectReason.JWT_INVALID) from exc

    user_id = validated.get(api_settings.USER_ID_CLAIM)
    if user_id in (None, ""):
        raise HandshakeRejectedError(RejectReason.JWT_INVALID)
    return str(user_id)


def resolve_identity(user_id: str) -> ConnectionIdentity:
    user_model = get_user_model()
    user = user_model.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first()
    if user is None:
        raise HandshakeRejectedError(RejectReason.USER_NOT_FOUND)
    if not user.is_active:
        raise HandshakeRejectedError(RejectReason.USER_INACTIVE)
    role = ADMIN_ROLE if getattr(user, "is_admin_role", False) else user.role
    return ConnectionIdentity(user_id=str(user.pk), role=str(role))


class SocketAuthenticator:
    """Gate every connection on a verified token and an existing user."""

    def __init__(
        self,
        *,
        verify: Callable[[str], str] = verify_token,
        lookup: Callable[[str], Awaitable[ConnectionIdentity]] | None = None,
    ) -> None:
        self._verify = verify
        self._lookup = lookup or database_sync_to_async(resolve_identity)

    async def authenticate(
        self,
        environ: dict[str, Any],
        auth: Any | None = None,
    ) -> ConnectionIdentity:
        token = extract_token(environ, auth)
        if not token:
            raise HandshakeRejectedError(RejectReason.TOKEN_MISSING)
        try:
            user_id = self._verify(token)
            return await self._lookup(user_id)
        except HandshakeRejectedError:
            raise
        except Exception as exc:
            logger.exception("Socket.IO handshake error")
            raise HandshakeRejectedError(RejectReason.SERVER_ERROR) from exc
