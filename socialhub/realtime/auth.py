"""Handshake authentication for Socket.IO connections.

Token sources, tried in order:

1. ``auth={"token": ...}`` passed by the client to ``io(url, {auth})``
2. ``Authorization: Bearer <token>`` request header
3. the session cookie (``settings.JWT_AUTH_COOKIE``) from the raw ``Cookie`` header

python-socketio passes different ``environ`` shapes depending on async mode:
a WSGI-style dict with ``HTTP_*`` keys, and under ASGI the original scope is
also available as ``environ["asgi.scope"]``. Both are read.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote

from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

from .exceptions import Unauthorized

logger = logging.getLogger(__name__)


def parse_cookie(header: str | None) -> dict[str, str]:
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for part in header.split(";"):
        key, _, value = part.partition("=")
        key = key.strip()
        if key:
            cookies[key] = unquote(value.strip())
    return cookies


def _header(environ: dict[str, Any], name: str) -> str | None:
    wsgi_key = "HTTP_" + name.upper().replace("-", "_")
    value = environ.get(wsgi_key)
    if isinstance(value, str) and value:
        return value

    scope = environ.get("asgi.scope")
    if not isinstance(scope, dict):
        return None
    wanted = name.lower().encode("latin-1")
    for key, raw in scope.get("headers", []):
        if key.lower() == wanted:
            return raw.decode("latin-1")
    return None


class ConnectionAuthenticator:
    """Resolves the user id bound to a connection attempt.

    A single verification pass; any failure raises ``Unauthorized``.
    """

    def __init__(self, cookie_name: str | None = None) -> None:
        self.cookie_name = cookie_name or getattr(settings, "JWT_AUTH_COOKIE", "token")
        self._jwt = JWTAuthentication()

    def extract_token(self, environ: dict[str, Any] | None, auth: Any | None) -> str | None:
        if isinstance(auth, dict):
            auth_token = auth.get("token")
            if isinstance(auth_token, str) and auth_token:
                return auth_token

        environ = environ if isinstance(environ, dict) else {}

        authorization = _header(environ, "Authorization")
        if authorization:
            try:
                raw = self._jwt.get_raw_token(authorization.encode("latin-1"))
            except AuthenticationFailed as exc:
                # A header with the right scheme but a broken shape is a
                # credential that fails verification, not a missing one.
                raise Unauthorized from exc
            if raw:
                return raw.decode("latin-1")

        cookie = parse_cookie(_header(environ, "Cookie")).get(self.cookie_name)
        if cookie:
            return cookie

        return None

    async def authenticate(self, environ: dict[str, Any] | None, auth: Any | None = None) -> int:
        token = self.extract_token(environ, auth)
        if not token:
            logger.debug("Socket handshake without credential")
            raise Unauthorized

        try:
            return await self._user_id_for_token(token)
        except (TokenError, AuthenticationFailed) as exc:
            logger.info("Socket handshake rejected: %s", exc)
            raise Unauthorized from exc

    @database_sync_to_async
    def _user_id_for_token(self, token: str) -> int:
        validated = self._jwt.get_validated_token(token)
        user = self._jwt.get_user(validated)
        return int(user.id)
