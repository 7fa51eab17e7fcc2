from django.contrib import admin

from socialhub.social import models


@admin.register(models.Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ["id", "author", "content", "created_at"]
    search_fields = ["content", "author__username"]
    list_filter = ["created_at"]


@admin.register(models.Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["id", "post", "author", "parent", "created_at"]
    search_fields = ["content", "author__username"]


admin.site.register(models.Like)
admin.site.register(models.Follow)
