from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING
from typing import Protocol

from .contract import room_for_user

if TYPE_CHECKING:  # import for type checking only
    from .contract import ServerEvent

logger = logging.getLogger(__name__)


class SocketServer(Protocol):
    """The slice of ``socketio.AsyncServer`` the registry relies on."""

    async def enter_room(self, sid: str, room: str, namespace: str | None = None): ...

    async def leave_room(self, sid: str, room: str, namespace: str | None = None): ...

    async def emit(self, event: str, data=None, to=None, room=None, **kwargs): ...


class PresenceRegistry:
    """Owns the mapping from user id to that user's live connections.

    Delivery is at-most-once and fire-and-forget: events addressed to a user
    with no live connection are dropped, nothing is queued for later.

    All calls run on the server's event loop; the maps are updated before the
    awaited room call, so join/leave are atomic with respect to deliveries.
    """

    def __init__(self, server: SocketServer) -> None:
        self._server = server
        self._user_by_sid: dict[str, int] = {}
        self._sids_by_user: dict[int, set[str]] = defaultdict(set)

    async def join(self, sid: str, user_id: int) -> None:
        user_id = int(user_id)
        bound = self._user_by_sid.get(sid)
        if bound is not None:
            if bound != user_id:
                logger.warning(
                    "Refusing to rebind connection %s from user %s to %s",
                    sid,
                    bound,
                    user_id,
                )
            return

        self._user_by_sid[sid] = user_id
        self._sids_by_user[user_id].add(sid)
        await self._server.enter_room(sid, room_for_user(user_id))
        logger.debug("Connection %s joined %s", sid, room_for_user(user_id))

    async def leave(self, sid: str) -> None:
        user_id = self._user_by_sid.pop(sid, None)
        if user_id is None:
            return

        sids = self._sids_by_user.get(user_id)
        if sids is not None:
            sids.discard(sid)
            if not sids:
                del self._sids_by_user[user_id]
        await self._server.leave_room(sid, room_for_user(user_id))
        logger.debug("Connection %s left %s", sid, room_for_user(user_id))

    async def deliver_to_user(self, user_id: int, event: ServerEvent) -> None:
        user_id = int(user_id)
        if not self._sids_by_user.get(user_id):
            logger.debug("Dropping %s for offline user %s", event.name, user_id)
            return
        await self._server.emit(event.name, event.payload(), room=room_for_user(user_id))

    async def deliver_to_all(self, event: ServerEvent) -> None:
        await self._server.emit(event.name, event.payload())

    async def deliver_to_connection(self, sid: str, event: ServerEvent) -> None:
        if sid not in self._user_by_sid:
            return
        await self._server.emit(event.name, event.payload(), to=sid)

    def user_for(self, sid: str) -> int | None:
        return self._user_by_sid.get(sid)

    def is_online(self, user_id: int) -> bool:
        return bool(self._sids_by_user.get(int(user_id)))

    def connection_count(self) -> int:
        return len(self._user_by_sid)
