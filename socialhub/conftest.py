from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from socialhub.realtime import socketio as realtime_socketio
from socialhub.realtime.contract import room_for_user
from socialhub.realtime.core import build_core

User = get_user_model()


@dataclass(frozen=True)
class Emitted:
    event: str
    data: Any
    to: str | None = None
    room: str | None = None


class FakeSocketServer:
    """Records what the realtime core asks the Socket.IO server to do."""

    def __init__(self):
        self.emitted: list[Emitted] = []
        self.rooms: dict[str, set[str]] = defaultdict(set)

    async def enter_room(self, sid, room, namespace=None):
        self.rooms[room].add(sid)

    async def leave_room(self, sid, room, namespace=None):
        self.rooms[room].discard(sid)

    async def emit(self, event, data=None, to=None, room=None, **kwargs):
        self.emitted.append(Emitted(event, data, to=to, room=room))

    def connected_sids(self) -> set[str]:
        return set().union(*self.rooms.values()) if self.rooms else set()

    def received_by_sid(self, sid: str) -> list[tuple[str, Any]]:
        """Events that reached one connection, in emit order."""

        out = []
        for item in self.emitted:
            if item.to is not None:
                reached = item.to == sid
            elif item.room is not None:
                reached = sid in self.rooms.get(item.room, set())
            else:
                reached = sid in self.connected_sids()
            if reached:
                out.append((item.event, item.data))
        return out

    def received_by_user(self, user_id: int) -> list[tuple[str, Any]]:
        return [
            (item.event, item.data)
            for item in self.emitted
            if item.room == room_for_user(user_id)
        ]

    def names(self) -> list[str]:
        return [item.event for item in self.emitted]


@pytest.fixture
def fake_server() -> FakeSocketServer:
    return FakeSocketServer()


@pytest.fixture(autouse=True)
def realtime(fake_server, monkeypatch):
    """Realtime core wired to the fake server for every test."""

    core = build_core(fake_server)
    monkeypatch.setattr(realtime_socketio, "core", core)
    return core


@pytest.fixture
def password() -> str:
    return "Str0ng-Passw0rd!"


@pytest.fixture
def user(db, password):
    return User.objects.create_user(
        username="alice",
        email="alice@example.com",
        password=password,
    )


@pytest.fixture
def other_user(db, password):
    return User.objects.create_user(
        username="bob",
        email="bob@example.com",
        password=password,
    )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user_client(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client
