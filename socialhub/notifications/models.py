from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Notification(models.Model):
    class Type(models.TextChoices):
        LIKE = "like", _("Like")
        COMMENT = "comment", _("Comment")
        FOLLOW = "follow", _("Follow")
        MESSAGE = "message", _("Message")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="triggered_notifications",
    )
    notification_type = models.CharField(max_length=20, choices=Type.choices)
    # Post id for likes and comments; unset for follows and messages.
    ref_id = models.BigIntegerField(null=True, blank=True)
    seen = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "seen"], name="notif_recipient_seen_idx"),
        ]

    def __str__(self):
        return f"{self.notification_type} {self.actor_id} -> {self.recipient_id}"
