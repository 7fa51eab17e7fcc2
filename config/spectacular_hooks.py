"""drf-spectacular hooks: one schema for ``/api/v1/`` with stable tag groups."""

from __future__ import annotations

TAG_PATTERNS = [
    (lambda p: p.startswith("/api/v1/auth/jwt/"), "JWT Authentication"),
    (lambda p: p.startswith("/api/v1/auth/"), "Authentication"),
    (lambda p: p.startswith("/api/v1/users/") and p.endswith(("/follow/", "/followers/", "/following/")), "Follows"),
    (lambda p: p.startswith("/api/v1/users/"), "Users"),
    (lambda p: p.startswith("/api/v1/posts/") and p.endswith("/like/"), "Likes"),
    (lambda p: p.startswith("/api/v1/posts/") and p.endswith("/comments/"), "Comments"),
    (lambda p: p.startswith("/api/v1/posts/"), "Posts"),
    (lambda p: p.startswith("/api/v1/comments/"), "Comments"),
    (lambda p: p.startswith("/api/v1/chat/"), "Chat"),
    (lambda p: p.startswith("/api/v1/notifications/"), "Notifications"),
    (lambda p: p == "/api/v1/schema/", "Meta"),
]


def exclude_legacy_prefix(endpoints, **kwargs):
    """Drop the ``/api/`` compatibility routes; they mirror ``/api/v1/``."""

    return [endpoint for endpoint in endpoints if endpoint[0].startswith("/api/v1/")]


def tag_override(result, generator, request, public):
    """Normalize tags across the schema so each path sits in one group."""
    for path, operations in result.get("paths", {}).items():
        tag = None
        for pred, name in TAG_PATTERNS:
            if pred(path):
                tag = name
                break
        if tag is None:
            continue
        for op in operations.values():
            op["tags"] = [tag]
    return result
