from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from socialhub.users.models import User

from .serializers import PublicUserSerializer
from .serializers import UserSerializer


@extend_schema_view(
    retrieve=extend_schema(tags=["Users"]),
    me=extend_schema(tags=["Users"]),
)
class UserViewSet(GenericViewSet):
    serializer_class = PublicUserSerializer
    queryset = User.objects.filter(is_active=True)
    lookup_field = "username"
    lookup_value_regex = r"[\w.@+-]+"
    pagination_class = None

    def get_permissions(self):
        if self.action == "retrieve":
            return [AllowAny()]
        return [IsAuthenticated()]

    def retrieve(self, request, username=None):
        serializer = self.get_serializer(self.get_object())
        return Response({"user": serializer.data})

    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(status=status.HTTP_200_OK, data={"user": serializer.data})
