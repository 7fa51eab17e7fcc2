from __future__ import annotations

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from socialhub.notifications.models import Notification

from .serializers import NotificationSerializer

LIST_LIMIT = 50


@extend_schema_view(
    list=extend_schema(tags=["Notifications"]),
    seen=extend_schema(tags=["Notifications"]),
)
class NotificationViewSet(mixins.ListModelMixin, GenericViewSet):
    """Notifications for the authenticated user.

    - list: latest notifications, newest first
    - seen: marks all of the caller's notifications as seen
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = None

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Notification.objects.none()
        return Notification.objects.filter(recipient=self.request.user).select_related(
            "actor",
        )

    def list(self, request, *args, **kwargs):
        notifications = self.get_queryset()[:LIST_LIMIT]
        serializer = self.get_serializer(notifications, many=True)
        return Response({"notifications": serializer.data})

    @action(detail=False, methods=["post"])
    def seen(self, request):
        Notification.objects.filter(recipient=request.user, seen=False).update(seen=True)
        return Response({"ok": True})
