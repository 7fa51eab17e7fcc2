from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from socialhub.users.models import PasswordResetToken
from socialhub.users.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["id", "username", "email", "name", "is_active", "created_at"]
    search_fields = ["username", "email", "name"]


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "expires_at", "used", "created_at"]
    list_filter = ["used"]
    raw_id_fields = ["user"]
    readonly_fields = ["token", "created_at"]
