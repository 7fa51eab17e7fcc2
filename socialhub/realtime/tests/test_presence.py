from datetime import UTC
from datetime import datetime

from asgiref.sync import async_to_sync

from socialhub.realtime.contract import FeedChanged
from socialhub.realtime.contract import NotificationCreated
from socialhub.realtime.presence import PresenceRegistry


def _event():
    return NotificationCreated(
        notification_type="follow",
        actor_id=2,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


class TestPresenceRegistry:
    def test_join_binds_connection_to_user_room(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)

        assert presence.user_for("a1") == 1
        assert presence.is_online(1)
        assert fake_server.rooms["user:1"] == {"a1"}

    def test_no_room_membership_before_join(self, fake_server):
        presence = PresenceRegistry(fake_server)

        assert presence.user_for("a1") is None
        assert presence.connection_count() == 0
        assert fake_server.connected_sids() == set()

    def test_join_is_idempotent(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)
        async_to_sync(presence.join)("a1", 1)

        assert presence.connection_count() == 1
        assert fake_server.rooms["user:1"] == {"a1"}

    def test_bound_identity_cannot_change(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)
        async_to_sync(presence.join)("a1", 2)

        assert presence.user_for("a1") == 1
        assert not presence.is_online(2)
        assert "a1" not in fake_server.rooms.get("user:2", set())

    def test_leave_twice_keeps_other_connections(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)
        async_to_sync(presence.join)("a2", 1)
        async_to_sync(presence.join)("b1", 2)

        async_to_sync(presence.leave)("a1")
        async_to_sync(presence.leave)("a1")

        assert presence.user_for("a1") is None
        assert presence.is_online(1)
        assert fake_server.rooms["user:1"] == {"a2"}
        assert fake_server.rooms["user:2"] == {"b1"}
        assert presence.connection_count() == 2

    def test_leave_unknown_connection_is_a_noop(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.leave)("ghost")

        assert presence.connection_count() == 0

    def test_user_goes_offline_after_last_connection_leaves(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)
        async_to_sync(presence.leave)("a1")

        assert not presence.is_online(1)

    def test_deliver_to_offline_user_is_dropped(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.deliver_to_user)(5, _event())

        assert fake_server.emitted == []

    def test_deliver_to_user_targets_the_user_room(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)
        async_to_sync(presence.join)("a2", 1)
        async_to_sync(presence.deliver_to_user)(1, _event())

        assert len(fake_server.emitted) == 1
        assert fake_server.emitted[0].room == "user:1"
        assert fake_server.received_by_sid("a1") == fake_server.received_by_sid("a2")

    def test_deliver_to_all_is_a_broadcast(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.join)("a1", 1)
        async_to_sync(presence.join)("b1", 2)
        async_to_sync(presence.deliver_to_all)(FeedChanged())

        assert fake_server.received_by_sid("a1") == [("feed-changed", {})]
        assert fake_server.received_by_sid("b1") == [("feed-changed", {})]

    def test_deliver_to_connection_skips_unknown_sid(self, fake_server):
        presence = PresenceRegistry(fake_server)
        async_to_sync(presence.deliver_to_connection)("ghost", FeedChanged())

        assert fake_server.emitted == []
