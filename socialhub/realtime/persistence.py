"""Durable writes awaited by the realtime core.

Both run the ORM in a worker thread via ``database_sync_to_async``.
"""

from __future__ import annotations

from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from socialhub.chat.models import Message
from socialhub.notifications.models import Notification

from .exceptions import PersistenceFailure
from .exceptions import RecipientNotFound


class DjangoPersistence:
    @database_sync_to_async
    def persist_message(self, sender_id: int, recipient_id: int, content: str) -> Message:
        self._require_user(recipient_id)
        try:
            return Message.objects.create(
                sender_id=sender_id,
                recipient_id=recipient_id,
                content=content,
            )
        except DatabaseError as exc:
            msg = f"could not store message {sender_id} -> {recipient_id}"
            raise PersistenceFailure(msg) from exc

    @database_sync_to_async
    def persist_notification(
        self,
        recipient_id: int,
        actor_id: int,
        kind: str,
        ref_id: int | None = None,
    ) -> Notification:
        self._require_user(recipient_id)
        try:
            return Notification.objects.create(
                recipient_id=recipient_id,
                actor_id=actor_id,
                notification_type=kind,
                ref_id=ref_id,
            )
        except DatabaseError as exc:
            msg = f"could not store {kind} notification for user {recipient_id}"
            raise PersistenceFailure(msg) from exc

    @staticmethod
    def _require_user(user_id: int) -> None:
        try:
            exists = get_user_model().objects.filter(pk=user_id).exists()
        except DatabaseError as exc:
            msg = f"could not look up user {user_id}"
            raise PersistenceFailure(msg) from exc
        if not exists:
            msg = f"user {user_id} does not exist"
            raise RecipientNotFound(msg)
