"""Realtime infrastructure (Socket.IO presence, chat and notification fan-out).

Every live connection belongs to exactly one per-user channel. HTTP write
paths and socket handlers reach connected users only through the presence
registry built in ``socialhub.realtime.socketio``.
"""
