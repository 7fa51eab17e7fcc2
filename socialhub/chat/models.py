from django.conf import settings
from django.db import models


class Message(models.Model):
    """A direct message between two users.

    Sender is always the authenticated user of the connection that sent it.
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages"
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
    )
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["sender", "recipient", "created_at"],
                name="chat_msg_pair_created_idx",
            ),
        ]

    def __str__(self):
        return f"{self.sender_id} -> {self.recipient_id}: {self.content[:30]}"
