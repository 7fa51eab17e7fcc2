from __future__ import annotations

import secrets

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db import transaction
from django.db.models import CharField
from django.db.models import EmailField
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for socialhub.
    The primary key doubles as the identity carried in JWT access tokens
    and in realtime channel names.
    """

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.username


class PasswordResetTokenQuerySet(models.QuerySet):
    def usable(self):
        return self.filter(used=False, expires_at__gt=timezone.now())


class PasswordResetToken(models.Model):
    """Single-use secret mailed to a user who forgot their password.

    Issuing a new one retires every unused token the user still holds.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )
    token = models.CharField(max_length=64, unique=True)
    expires_at = models.DateTimeField()
    used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PasswordResetTokenQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Password reset for {self.user_id}"

    @classmethod
    def issue(cls, user) -> PasswordResetToken:
        with transaction.atomic():
            cls.objects.filter(user=user, used=False).update(used=True)
            return cls.objects.create(
                user=user,
                token=secrets.token_hex(32),
                expires_at=timezone.now() + settings.PASSWORD_RESET_TOKEN_LIFETIME,
            )
