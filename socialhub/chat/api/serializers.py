from rest_framework import serializers

from socialhub.chat.models import Message


class MessageSerializer(serializers.ModelSerializer[Message]):
    sender_id = serializers.IntegerField(read_only=True)
    recipient_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Message
        fields = ["id", "sender_id", "recipient_id", "content", "created_at"]
        read_only_fields = fields
