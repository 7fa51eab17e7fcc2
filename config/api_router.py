from django.conf import settings
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from socialhub.chat.api.views import ChatHistoryViewSet
from socialhub.notifications.api.views import NotificationViewSet
from socialhub.social.api.views import CommentViewSet
from socialhub.social.api.views import FollowViewSet
from socialhub.social.api.views import PostViewSet
from socialhub.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("posts", PostViewSet, basename="posts")
router.register("comments", CommentViewSet)
router.register("notifications", NotificationViewSet, basename="notifications")

# Follow graph and chat history are keyed by user id rather than a router
# lookup, so they are wired by hand.
follow_toggle = FollowViewSet.as_view({"post": "toggle"})
follow_followers = FollowViewSet.as_view({"get": "followers"})
follow_following = FollowViewSet.as_view({"get": "following"})
chat_history = ChatHistoryViewSet.as_view({"get": "history"})

app_name = "api"
# Prepend manual paths so they take precedence over the username lookup
urlpatterns = [
    path("users/<int:user_id>/follow/", follow_toggle, name="user-follow"),
    path("users/<int:user_id>/followers/", follow_followers, name="user-followers"),
    path("users/<int:user_id>/following/", follow_following, name="user-following"),
    path("chat/history/<int:user_id>/", chat_history, name="chat-history"),
    *router.urls,
]
