from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db import transaction
from django.db.models import Count
from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from socialhub.notifications.models import Notification
from socialhub.realtime.events.notifications import publish_feed_changed
from socialhub.realtime.events.notifications import publish_notification
from socialhub.social.models import Comment
from socialhub.social.models import Follow
from socialhub.social.models import Like
from socialhub.social.models import Post

from .serializers import CommentSerializer
from .serializers import PostSerializer
from .serializers import build_comment_tree

logger = logging.getLogger(__name__)

User = get_user_model()

FEED_LIMIT = 100


def _not_found_or_not_owner() -> Response:
    return Response(
        {"error": "Not found or not owner"},
        status=status.HTTP_404_NOT_FOUND,
    )


@extend_schema_view(
    create=extend_schema(tags=["Posts"]),
    destroy=extend_schema(tags=["Posts"]),
    feed=extend_schema(tags=["Posts"]),
    like=extend_schema(tags=["Likes"]),
    comments=extend_schema(tags=["Comments"]),
)
class PostViewSet(GenericViewSet):
    serializer_class = PostSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return (
            Post.objects.select_related("author")
            .annotate(
                likes_count=Count("likes", distinct=True),
                comments_count=Count("comments", distinct=True),
            )
            .order_by("-created_at", "-id")
        )

    def get_permissions(self):
        if self.action == "comments" and self.request.method == "GET":
            return [AllowAny()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = serializer.save(author=request.user)
        publish_feed_changed()
        return Response(
            {"post": PostSerializer(post).data},
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, pk=None):
        deleted, _ = Post.objects.filter(pk=pk, author=request.user).delete()
        if not deleted:
            return _not_found_or_not_owner()
        publish_feed_changed()
        return Response({"ok": True})

    @action(detail=False, methods=["get"])
    def feed(self, request):
        """Latest posts from the caller and the people they follow.

        ``?all=true`` returns the latest posts from everyone instead.
        """

        queryset = self.get_queryset()
        if request.query_params.get("all") != "true":
            followed = Follow.objects.filter(follower=request.user).values("following_id")
            queryset = queryset.filter(Q(author=request.user) | Q(author_id__in=followed))
        posts = queryset[:FEED_LIMIT]
        return Response({"posts": PostSerializer(posts, many=True).data})

    @action(detail=True, methods=["post"])
    def like(self, request, pk=None):
        post = get_object_or_404(Post, pk=pk)
        created = False
        removed, _ = Like.objects.filter(user=request.user, post=post).delete()
        if removed:
            liked = False
        else:
            try:
                with transaction.atomic():
                    Like.objects.create(user=request.user, post=post)
                created = True
            except IntegrityError:
                # A concurrent request already liked it and notified the owner.
                logger.info("Duplicate like by user %s on post %s", request.user.pk, post.pk)
            liked = True

        notification = None
        if created:
            notification = publish_notification(
                post.author_id,
                request.user.pk,
                Notification.Type.LIKE,
                post.pk,
            )
        if notification is None:
            publish_feed_changed()

        return Response(
            {
                "ok": True,
                "action": "liked" if liked else "unliked",
                "likes": Like.objects.filter(post=post).count(),
            },
        )

    @action(detail=True, methods=["get", "post"])
    def comments(self, request, pk=None):
        post = get_object_or_404(Post, pk=pk)
        if request.method == "GET":
            comments = (
                Comment.objects.filter(post=post)
                .select_related("author")
                .order_by("created_at", "id")
            )
            return Response({"comments": build_comment_tree(comments)})

        serializer = CommentSerializer(data=request.data, context={"post": post})
        serializer.is_valid(raise_exception=True)
        comment = serializer.save(post=post, author=request.user)

        notification = publish_notification(
            post.author_id,
            request.user.pk,
            Notification.Type.COMMENT,
            post.pk,
        )
        if notification is None:
            publish_feed_changed()
        return Response(
            {"comment": CommentSerializer(comment).data},
            status=status.HTTP_201_CREATED,
        )


@extend_schema_view(destroy=extend_schema(tags=["Comments"]))
class CommentViewSet(GenericViewSet):
    serializer_class = CommentSerializer
    permission_classes = [IsAuthenticated]
    queryset = Comment.objects.all()

    def destroy(self, request, pk=None):
        deleted, _ = Comment.objects.filter(pk=pk, author=request.user).delete()
        if not deleted:
            return _not_found_or_not_owner()
        publish_feed_changed()
        return Response({"ok": True})


def _user_summaries(users) -> list[dict]:
    return [{"id": user.pk, "username": user.username} for user in users]


@extend_schema_view(
    toggle=extend_schema(tags=["Follows"]),
    followers=extend_schema(tags=["Follows"]),
    following=extend_schema(tags=["Follows"]),
)
class FollowViewSet(GenericViewSet):
    """Follow graph for one user; wired by hand under ``users/<id>/``."""

    permission_classes = [IsAuthenticated]
    queryset = Follow.objects.all()

    def get_permissions(self):
        if self.action in {"followers", "following"}:
            return [AllowAny()]
        return super().get_permissions()

    def toggle(self, request, user_id=None):
        target = get_object_or_404(User, pk=user_id)
        if target.pk == request.user.pk:
            return Response(
                {"error": "Cannot follow yourself"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        removed, _ = Follow.objects.filter(follower=request.user, following=target).delete()
        if removed:
            return Response({"ok": True, "action": "unfollowed"})

        Follow.objects.get_or_create(follower=request.user, following=target)
        publish_notification(target.pk, request.user.pk, Notification.Type.FOLLOW)
        return Response({"ok": True, "action": "followed"})

    def followers(self, request, user_id=None):
        users = User.objects.filter(following__following_id=user_id).order_by("id")
        return Response({"followers": _user_summaries(users)})

    def following(self, request, user_id=None):
        users = User.objects.filter(followers__follower_id=user_id).order_by("id")
        return Response({"following": _user_summaries(users)})
