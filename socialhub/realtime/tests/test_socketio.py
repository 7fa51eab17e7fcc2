import pytest
from asgiref.sync import async_to_sync
from rest_framework_simplejwt.tokens import AccessToken

from socialhub.chat.models import Message
from socialhub.realtime import socketio as realtime_socketio
from socialhub.realtime.core import build_core
from socialhub.realtime.exceptions import PersistenceFailure
from socialhub.realtime.exceptions import Unauthorized
from socialhub.realtime.persistence import DjangoPersistence

pytestmark = pytest.mark.django_db(transaction=True)


class BrokenMessageStore(DjangoPersistence):
    async def persist_message(self, *args, **kwargs):
        msg = "messages table unavailable"
        raise PersistenceFailure(msg)


def _handshake(user, sid):
    token = str(AccessToken.for_user(user))
    async_to_sync(realtime_socketio.connect)(sid, {}, {"token": token})


class TestConnectHandlers:
    def test_connect_joins_user_room(self, realtime, fake_server, user):
        _handshake(user, "a1")

        assert realtime.presence.user_for("a1") == user.pk
        assert fake_server.rooms[f"user:{user.pk}"] == {"a1"}

    def test_connect_without_credential_is_refused_before_join(self, realtime, fake_server):
        with pytest.raises(Unauthorized):
            async_to_sync(realtime_socketio.connect)("x1", {}, None)

        assert realtime.presence.connection_count() == 0
        assert fake_server.connected_sids() == set()

    def test_connect_with_cookie(self, realtime, user):
        token = str(AccessToken.for_user(user))
        environ = {"HTTP_COOKIE": f"token={token}"}
        async_to_sync(realtime_socketio.connect)("a1", environ)

        assert realtime.presence.user_for("a1") == user.pk

    def test_disconnect_leaves_room(self, realtime, fake_server, user):
        _handshake(user, "a1")
        async_to_sync(realtime_socketio.disconnect)("a1", "client disconnect")
        async_to_sync(realtime_socketio.disconnect)("a1")

        assert realtime.presence.connection_count() == 0
        assert fake_server.rooms[f"user:{user.pk}"] == set()

    def test_connection_count_reflects_presence(self, realtime, user, other_user):
        _handshake(user, "a1")
        _handshake(other_user, "b1")

        assert realtime_socketio.connection_count() == 2


class TestChatHandlers:
    def test_chat_send_delivers(self, realtime, fake_server, user, other_user):
        _handshake(user, "a1")
        _handshake(other_user, "b1")

        async_to_sync(realtime_socketio.chat_send)(
            "a1",
            {"toUserId": str(other_user.pk), "content": "hi"},
        )

        assert [name for name, _ in fake_server.received_by_sid("b1")] == [
            "message-received",
            "notification-created",
        ]
        assert Message.objects.get().sender_id == user.pk

    def test_sender_comes_from_the_connection(self, realtime, user, other_user):
        _handshake(user, "a1")

        async_to_sync(realtime_socketio.chat_send)(
            "a1",
            {"toUserId": other_user.pk, "content": "hi", "from": other_user.pk},
        )

        assert Message.objects.get().sender_id == user.pk

    def test_malformed_chat_send_is_silent(self, realtime, fake_server, user):
        _handshake(user, "a1")

        async_to_sync(realtime_socketio.chat_send)("a1", {"content": "hi"})
        async_to_sync(realtime_socketio.chat_send)("a1", {"toUserId": 3, "content": ""})
        async_to_sync(realtime_socketio.chat_send)("a1", None)

        assert fake_server.emitted == []
        assert not Message.objects.exists()

    def test_persistence_failure_reports_to_sender_only(
        self,
        fake_server,
        monkeypatch,
        user,
        other_user,
    ):
        core = build_core(fake_server, persistence=BrokenMessageStore())
        monkeypatch.setattr(realtime_socketio, "core", core)
        _handshake(user, "a1")
        _handshake(user, "a2")
        _handshake(other_user, "b1")

        async_to_sync(realtime_socketio.chat_send)(
            "a1",
            {"toUserId": other_user.pk, "content": "hi"},
        )

        assert len(fake_server.emitted) == 1
        failure = fake_server.emitted[0]
        assert failure.event == "send-failed"
        assert failure.to == "a1"
        assert failure.data == {"toUserId": other_user.pk, "reason": "not_stored"}
        assert fake_server.received_by_sid("b1") == []
        assert fake_server.received_by_sid("a2") == []

    def test_chat_typing_relays(self, realtime, fake_server, user, other_user):
        _handshake(user, "a1")
        _handshake(other_user, "b1")

        async_to_sync(realtime_socketio.chat_typing)(
            "a1",
            {"toUserId": other_user.pk, "username": "alice", "isTyping": True},
        )

        assert fake_server.received_by_sid("b1") == [
            ("peer-typing", {"userId": user.pk, "username": "alice", "isTyping": True}),
        ]

    def test_malformed_chat_typing_is_silent(self, realtime, fake_server, user):
        _handshake(user, "a1")

        async_to_sync(realtime_socketio.chat_typing)("a1", {"isTyping": True})

        assert fake_server.emitted == []
