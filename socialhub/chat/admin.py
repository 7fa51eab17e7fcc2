from django.contrib import admin

from socialhub.chat import models


@admin.register(models.Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "sender", "recipient", "content", "created_at"]
    search_fields = ["content", "sender__username", "recipient__username"]
    list_filter = ["created_at"]
