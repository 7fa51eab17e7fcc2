from __future__ import annotations

from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync

from socialhub.realtime import socketio as realtime

if TYPE_CHECKING:  # import for type checking only
    from socialhub.notifications.models import Notification


def publish_notification(
    recipient_id: int,
    actor_id: int,
    kind: str,
    ref_id: int | None = None,
) -> Notification | None:
    """Store a notification and push it to the recipient's live connections."""

    return async_to_sync(realtime.core.notifications.notify)(
        recipient_id,
        actor_id,
        kind,
        ref_id,
    )


def publish_feed_changed() -> None:
    async_to_sync(realtime.core.notifications.feed_changed)()
