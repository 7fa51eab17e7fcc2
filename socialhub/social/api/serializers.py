from __future__ import annotations

from typing import Any

from rest_framework import serializers

from socialhub.social.models import Comment
from socialhub.social.models import Post


class PostSerializer(serializers.ModelSerializer[Post]):
    user_id = serializers.IntegerField(source="author_id", read_only=True)
    username = serializers.CharField(source="author.username", read_only=True)
    likes_count = serializers.IntegerField(read_only=True, default=0)
    comments_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Post
        fields = [
            "id",
            "user_id",
            "username",
            "content",
            "created_at",
            "likes_count",
            "comments_count",
        ]
        read_only_fields = ["id", "created_at"]

    def validate_content(self, value: str) -> str:
        if not value.strip():
            msg = "Content required"
            raise serializers.ValidationError(msg)
        return value


class CommentSerializer(serializers.ModelSerializer[Comment]):
    user_id = serializers.IntegerField(source="author_id", read_only=True)
    username = serializers.CharField(source="author.username", read_only=True)
    post_id = serializers.IntegerField(read_only=True)
    parent_id = serializers.PrimaryKeyRelatedField(
        source="parent",
        queryset=Comment.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Comment
        fields = ["id", "post_id", "user_id", "username", "content", "parent_id", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_content(self, value: str) -> str:
        if not value.strip():
            msg = "Content required"
            raise serializers.ValidationError(msg)
        return value

    def validate_parent_id(self, value: Comment | None) -> Comment | None:
        post = self.context.get("post")
        if value is not None and post is not None and value.post_id != post.pk:
            msg = "Reply must belong to the same post."
            raise serializers.ValidationError(msg)
        return value


def build_comment_tree(comments) -> list[dict[str, Any]]:
    """Nest replies under their parent; returns the top-level comments.

    ``comments`` must be ordered oldest first so replies keep that order.
    """

    comments = list(comments)
    nodes: dict[int, dict[str, Any]] = {}
    top_level: list[dict[str, Any]] = []
    for comment in comments:
        node = dict(CommentSerializer(comment).data)
        node["replies"] = []
        nodes[comment.pk] = node

    for comment in comments:
        node = nodes[comment.pk]
        if comment.parent_id:
            parent = nodes.get(comment.parent_id)
            if parent is not None:
                parent["replies"].append(node)
        else:
            top_level.append(node)
    return top_level
