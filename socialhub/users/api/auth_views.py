from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from socialhub.users.models import User

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail
from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from socialhub.users.models import PasswordResetToken

from .serializers import ForgotPasswordSerializer
from .serializers import LoginSerializer
from .serializers import RegisterSerializer
from .serializers import ResetPasswordSerializer
from .serializers import ResetTokenSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _cookie_name() -> str:
    return getattr(settings, "JWT_AUTH_COOKIE", "token")


def _cookie_kwargs() -> dict:
    return {
        "httponly": True,
        "secure": getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }


def _set_auth_cookie(response: Response, token: str) -> None:
    lifetime = settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
    response.set_cookie(
        _cookie_name(),
        token,
        max_age=int(lifetime.total_seconds()),
        **_cookie_kwargs(),
    )


def _token_response(user: User, status_code: int) -> Response:
    token = str(AccessToken.for_user(user))
    response = Response(
        {"user": UserSerializer(user).data, "token": token},
        status=status_code,
    )
    _set_auth_cookie(response, token)
    return response


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class RegisterView(APIView):
    """Create an account and sign the new user in."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = RegisterSerializer

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return _token_response(user, status.HTTP_201_CREATED)


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class CookieLoginView(APIView):
    """Login that sets the HttpOnly JWT cookie and returns the token.

    The token is echoed in the body so socket clients can pass it in the
    handshake ``auth`` payload when cookies are not shared.
    """

    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = LoginSerializer

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        if not serializer.is_valid():
            if serializer.errors.keys() & {"email", "password"}:
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            return Response(
                {"error": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        return _token_response(serializer.validated_data["user"], status.HTTP_200_OK)


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        response = Response({"ok": True})
        response.delete_cookie(
            _cookie_name(),
            path="/",
            samesite=getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        )
        return response


RESET_REQUESTED_MESSAGE = "If the email exists, a reset link has been sent"


def _send_reset_email(reset: PasswordResetToken) -> None:
    link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={reset.token}"
    send_mail(
        subject="Reset your socialhub password",
        message=(
            f"Hi {reset.user.username},\n\n"
            f"Use this link within the next hour to choose a new password:\n{link}\n\n"
            "If you did not ask for this, ignore this email."
        ),
        from_email=None,
        recipient_list=[reset.user.email],
    )


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class ForgotPasswordView(APIView):
    """Mail a one-hour reset link. The answer never reveals whether the email is known."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = ForgotPasswordSerializer

    def post(self, request, *args, **kwargs):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        user = get_user_model().objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            logger.info("Password reset requested for unknown email")
        else:
            reset = PasswordResetToken.issue(user)
            _send_reset_email(reset)
            logger.info("Password reset issued for user %s", user.pk)
        return Response({"message": RESET_REQUESTED_MESSAGE})


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = ResetPasswordSerializer

    def post(self, request, *args, **kwargs):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            reset = (
                PasswordResetToken.objects.usable()
                .select_for_update()
                .select_related("user")
                .filter(token=serializer.validated_data["token"])
                .first()
            )
            if reset is None:
                return Response(
                    {"error": "Invalid or expired token"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            user = reset.user
            user.set_password(serializer.validated_data["new_password"])
            user.save(update_fields=["password", "updated_at"])
            reset.used = True
            reset.save(update_fields=["used"])

        logger.info("Password reset completed for user %s", user.pk)
        return Response({"message": "Password updated"})


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class VerifyResetTokenView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = ResetTokenSerializer

    def post(self, request, *args, **kwargs):
        serializer = ResetTokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        valid = (
            PasswordResetToken.objects.usable()
            .filter(token=serializer.validated_data["token"])
            .exists()
        )
        return Response({"valid": valid})
