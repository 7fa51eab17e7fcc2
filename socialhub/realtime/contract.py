"""Wire contract shared by socket handlers, the presence registry and HTTP writers.

Each event name maps to exactly one frozen dataclass with a fixed field set.
Outbound events render themselves with ``payload()``; inbound events are
parsed with ``from_payload()``, which raises ``ValidationDropped`` for
anything the handlers should silently ignore.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from typing import ClassVar

from .exceptions import ValidationDropped

CHANNEL_PREFIX = "user:"

# Inbound (client -> server)
CHAT_SEND = "chat:send"
CHAT_TYPING = "chat:typing"

# Outbound (server -> user channel / everyone)
MESSAGE_RECEIVED = "message-received"
PEER_TYPING = "peer-typing"
NOTIFICATION_CREATED = "notification-created"
FEED_CHANGED = "feed-changed"
SEND_FAILED = "send-failed"

FEED_NOTIFICATION_TYPES = frozenset({"like", "comment", "follow"})


def room_for_user(user_id: int) -> str:
    return f"{CHANNEL_PREFIX}{int(user_id)}"


def _timestamp(value: datetime) -> str:
    return value.isoformat()


def _coerce_user_id(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        msg = "toUserId is required"
        raise ValidationDropped(msg)
    if isinstance(value, int):
        user_id = value
    elif isinstance(value, str) and value.strip().isdigit():
        user_id = int(value.strip())
    else:
        msg = f"toUserId must be an integer, got {value!r}"
        raise ValidationDropped(msg)
    if user_id <= 0:
        msg = "toUserId must be positive"
        raise ValidationDropped(msg)
    return user_id


def _require_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        msg = "payload must be an object"
        raise ValidationDropped(msg)
    return data


@dataclass(frozen=True)
class ChatSend:
    name: ClassVar[str] = CHAT_SEND

    to_user_id: int
    content: str

    @classmethod
    def from_payload(cls, data: Any) -> ChatSend:
        data = _require_mapping(data)
        to_user_id = _coerce_user_id(data.get("toUserId"))
        content = data.get("content")
        if not isinstance(content, str) or not content:
            msg = "content is required"
            raise ValidationDropped(msg)
        return cls(to_user_id=to_user_id, content=content)


@dataclass(frozen=True)
class ChatTyping:
    name: ClassVar[str] = CHAT_TYPING

    to_user_id: int
    username: str | None
    is_typing: bool

    @classmethod
    def from_payload(cls, data: Any) -> ChatTyping:
        data = _require_mapping(data)
        to_user_id = _coerce_user_id(data.get("toUserId"))
        username = data.get("username")
        return cls(
            to_user_id=to_user_id,
            username=username if isinstance(username, str) else None,
            is_typing=bool(data.get("isTyping")),
        )


class ServerEvent:
    """Base for everything the server pushes to clients."""

    name: ClassVar[str]

    def payload(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class MessageReceived(ServerEvent):
    name: ClassVar[str] = MESSAGE_RECEIVED

    sender_id: int
    content: str
    created_at: datetime
    is_echo: bool = False

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "from": self.sender_id,
            "content": self.content,
            "created_at": _timestamp(self.created_at),
        }
        if self.is_echo:
            data["self"] = True
        return data


@dataclass(frozen=True)
class PeerTyping(ServerEvent):
    name: ClassVar[str] = PEER_TYPING

    user_id: int
    username: str | None
    is_typing: bool

    def payload(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "username": self.username,
            "isTyping": self.is_typing,
        }


@dataclass(frozen=True)
class NotificationCreated(ServerEvent):
    name: ClassVar[str] = NOTIFICATION_CREATED

    notification_type: str
    actor_id: int
    created_at: datetime
    ref_id: int | None = None

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.notification_type,
            "actor_id": self.actor_id,
            "created_at": _timestamp(self.created_at),
        }
        if self.ref_id is not None:
            data["ref_id"] = self.ref_id
        return data


@dataclass(frozen=True)
class FeedChanged(ServerEvent):
    name: ClassVar[str] = FEED_CHANGED

    def payload(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class SendFailed(ServerEvent):
    """Local error report for the connection whose send could not be stored."""

    name: ClassVar[str] = SEND_FAILED

    to_user_id: int
    reason: str

    def payload(self) -> dict[str, Any]:
        return {"toUserId": self.to_user_id, "reason": self.reason}
