from __future__ import annotations

from django.db.models import Q
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from socialhub.chat.models import Message

from .serializers import MessageSerializer

HISTORY_LIMIT = 200


@extend_schema_view(history=extend_schema(tags=["Chat"]))
class ChatHistoryViewSet(GenericViewSet):
    serializer_class = MessageSerializer
    permission_classes = [IsAuthenticated]
    queryset = Message.objects.all()

    def history(self, request, user_id=None):
        """Conversation between the caller and ``user_id``, oldest first.

        Only the first ``HISTORY_LIMIT`` messages of the conversation are
        returned.
        """

        me = request.user.pk
        messages = Message.objects.filter(
            Q(sender_id=me, recipient_id=user_id) | Q(sender_id=user_id, recipient_id=me),
        ).order_by("created_at", "id")[:HISTORY_LIMIT]
        return Response({"messages": MessageSerializer(messages, many=True).data})
