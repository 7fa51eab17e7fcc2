from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from socialhub.notifications.models import Notification

from .contract import FEED_NOTIFICATION_TYPES
from .contract import FeedChanged
from .contract import NotificationCreated

if TYPE_CHECKING:  # import for type checking only
    from .persistence import DjangoPersistence
    from .presence import PresenceRegistry

logger = logging.getLogger(__name__)


class NotificationFanout:
    def __init__(self, presence: PresenceRegistry, persistence: DjangoPersistence) -> None:
        self.presence = presence
        self.persistence = persistence

    async def notify(
        self,
        recipient_id: int,
        actor_id: int,
        kind: str,
        ref_id: int | None = None,
    ) -> Notification | None:
        """Store a notification and push it to the recipient.

        Acting on your own content notifies nobody. Likes, comments and
        follows also tell every client that the shared feed changed.
        """

        try:
            kind = Notification.Type(kind).value
        except ValueError as exc:
            msg = f"Unknown notification kind: {kind!r}"
            raise ValueError(msg) from exc
        if int(recipient_id) == int(actor_id):
            logger.debug("Skipping %s notification from user %s to themselves", kind, actor_id)
            return None

        notification = await self.persistence.persist_notification(
            recipient_id,
            actor_id,
            kind,
            ref_id,
        )
        await self.presence.deliver_to_user(
            recipient_id,
            NotificationCreated(
                notification_type=kind,
                actor_id=int(actor_id),
                created_at=notification.created_at,
                ref_id=ref_id,
            ),
        )
        if kind in FEED_NOTIFICATION_TYPES:
            await self.presence.deliver_to_all(FeedChanged())
        return notification

    async def feed_changed(self) -> None:
        await self.presence.deliver_to_all(FeedChanged())
