from __future__ import annotations

from dataclasses import dataclass

from .auth import ConnectionAuthenticator
from .fanout import NotificationFanout
from .messaging import DirectMessageChannel
from .messaging import TypingRelay
from .persistence import DjangoPersistence
from .presence import PresenceRegistry
from .presence import SocketServer


@dataclass(frozen=True)
class RealtimeCore:
    """Everything the socket handlers and HTTP writers share, wired once."""

    authenticator: ConnectionAuthenticator
    presence: PresenceRegistry
    messages: DirectMessageChannel
    typing: TypingRelay
    notifications: NotificationFanout


def build_core(
    server: SocketServer,
    persistence: DjangoPersistence | None = None,
    authenticator: ConnectionAuthenticator | None = None,
) -> RealtimeCore:
    persistence = persistence or DjangoPersistence()
    presence = PresenceRegistry(server)
    return RealtimeCore(
        authenticator=authenticator or ConnectionAuthenticator(),
        presence=presence,
        messages=DirectMessageChannel(presence, persistence),
        typing=TypingRelay(presence),
        notifications=NotificationFanout(presence, persistence),
    )
