"""Socket.IO server for the web client.

One process-wide ``AsyncServer`` mounted by ``config/asgi.py``. Every
authenticated connection joins its owner's ``user:<id>`` room and nothing
else; chat, typing and notification events are all addressed to those rooms.

Handlers resolve the module-level ``core`` at call time.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from django.conf import settings

from .contract import ChatSend
from .contract import ChatTyping
from .contract import SendFailed
from .core import build_core
from .exceptions import PersistenceFailure
from .exceptions import Unauthorized
from .exceptions import ValidationDropped

logger = logging.getLogger(__name__)


def _cors_allowed_origins() -> str | list[str]:
    origins = list(getattr(settings, "CORS_ALLOWED_ORIGINS", ["*"]))
    if not origins or "*" in origins:
        return "*"
    return origins


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=_cors_allowed_origins(),
    logger=False,
    engineio_logger=False,
)

core = build_core(sio)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    try:
        user_id = await core.authenticator.authenticate(environ, auth)
    except Unauthorized:
        raise
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        raise Unauthorized from exc

    await core.presence.join(sid, user_id)
    logger.info("User %s connected (%s)", user_id, sid)


@sio.event
async def disconnect(sid: str, *args):
    user_id = core.presence.user_for(sid)
    await core.presence.leave(sid)
    if user_id is not None:
        logger.info("User %s disconnected (%s)", user_id, sid)


@sio.on("chat:send")
async def chat_send(sid: str, data: Any = None):
    try:
        event = ChatSend.from_payload(data)
    except ValidationDropped as exc:
        logger.debug("Ignoring chat:send from %s: %s", sid, exc)
        return

    try:
        await core.messages.send(sid, event.to_user_id, event.content)
    except PersistenceFailure:
        logger.exception("Failed to store message from %s to user %s", sid, event.to_user_id)
        await core.presence.deliver_to_connection(
            sid,
            SendFailed(to_user_id=event.to_user_id, reason="not_stored"),
        )


@sio.on("chat:typing")
async def chat_typing(sid: str, data: Any = None):
    try:
        event = ChatTyping.from_payload(data)
    except ValidationDropped as exc:
        logger.debug("Ignoring chat:typing from %s: %s", sid, exc)
        return

    await core.typing.set_typing(
        sid,
        event.to_user_id,
        event.username,
        is_typing=event.is_typing,
    )


def connection_count() -> int:
    return core.presence.connection_count()
