from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from socialhub.notifications.models import Notification

from .contract import MessageReceived
from .contract import NotificationCreated
from .contract import PeerTyping

if TYPE_CHECKING:  # import for type checking only
    from socialhub.chat.models import Message

    from .persistence import DjangoPersistence
    from .presence import PresenceRegistry

logger = logging.getLogger(__name__)


class DirectMessageChannel:
    """Point-to-point chat between two users.

    ``send`` stores the message and its ``message`` notification before any
    event leaves the server. If either write fails, nobody receives anything
    and the ``PersistenceFailure`` propagates to the caller.
    """

    def __init__(self, presence: PresenceRegistry, persistence: DjangoPersistence) -> None:
        self.presence = presence
        self.persistence = persistence

    async def send(self, sid: str, recipient_id: int | None, content: str | None) -> Message | None:
        sender_id = self.presence.user_for(sid)
        if sender_id is None:
            logger.warning("chat:send from unbound connection %s", sid)
            return None
        if not recipient_id or not content:
            logger.debug("Dropping empty chat:send from user %s", sender_id)
            return None

        message = await self.persistence.persist_message(sender_id, recipient_id, content)
        notification = await self.persistence.persist_notification(
            recipient_id,
            sender_id,
            Notification.Type.MESSAGE.value,
        )

        await self.presence.deliver_to_user(
            recipient_id,
            MessageReceived(
                sender_id=sender_id,
                content=message.content,
                created_at=message.created_at,
            ),
        )
        await self.presence.deliver_to_user(
            sender_id,
            MessageReceived(
                sender_id=sender_id,
                content=message.content,
                created_at=message.created_at,
                is_echo=True,
            ),
        )
        await self.presence.deliver_to_user(
            recipient_id,
            NotificationCreated(
                notification_type=Notification.Type.MESSAGE.value,
                actor_id=sender_id,
                created_at=notification.created_at,
            ),
        )
        return message


class TypingRelay:
    """Forwards typing indicators to the peer. Nothing is stored."""

    def __init__(self, presence: PresenceRegistry) -> None:
        self.presence = presence

    async def set_typing(
        self,
        sid: str,
        recipient_id: int | None,
        username: str | None,
        *,
        is_typing: bool,
    ) -> None:
        sender_id = self.presence.user_for(sid)
        if sender_id is None or not recipient_id:
            return
        await self.presence.deliver_to_user(
            recipient_id,
            PeerTyping(user_id=sender_id, username=username, is_typing=bool(is_typing)),
        )
