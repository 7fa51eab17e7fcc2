from django.contrib import admin

from socialhub.notifications import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "recipient", "actor", "notification_type", "ref_id", "seen"]
    search_fields = ["recipient__username", "actor__username"]
    list_filter = ["notification_type", "seen", "created_at"]
