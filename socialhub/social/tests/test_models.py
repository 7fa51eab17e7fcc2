import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.db import transaction

from socialhub.social.models import Comment
from socialhub.social.models import Follow
from socialhub.social.models import Like
from socialhub.social.models import Post

pytestmark = pytest.mark.django_db


def test_self_follow_is_rejected_by_the_database(user):
    with pytest.raises(IntegrityError), transaction.atomic():
        Follow.objects.create(follower=user, following=user)


def test_like_is_unique_per_user_and_post(user):
    post = Post.objects.create(author=user, content="p")
    Like.objects.create(user=user, post=post)
    with pytest.raises(IntegrityError), transaction.atomic():
        Like.objects.create(user=user, post=post)


def test_reply_on_another_post_fails_validation(user):
    post = Post.objects.create(author=user, content="p")
    other = Post.objects.create(author=user, content="q")
    parent = Comment.objects.create(post=other, author=user, content="root")

    reply = Comment(post=post, author=user, content="reply", parent=parent)
    with pytest.raises(ValidationError):
        reply.full_clean()
