from rest_framework import serializers

from socialhub.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer[Notification]):
    user_id = serializers.IntegerField(source="recipient_id", read_only=True)
    actor_id = serializers.IntegerField(read_only=True)
    actor_username = serializers.CharField(source="actor.username", read_only=True)
    type = serializers.CharField(source="notification_type", read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "user_id",
            "actor_id",
            "actor_username",
            "type",
            "ref_id",
            "seen",
            "created_at",
        ]
        read_only_fields = fields
