"""In-process stand-ins for the Socket.IO server and the presence store."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any


class FakeSocketServer:
    """Records handlers, sessions, rooms and deliveries like ``AsyncServer``.

    ``inbox[sid]`` holds every ``(event, data)`` delivered to a connection,
    honoring ``to``/``room``/``skip_sid`` the same way the real server does.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Any] = {}
        self.sessions: dict[str, dict[str, Any]] = {}
        self.connected: set[str] = set()
        self.room_members: dict[str, set[str]] = defaultdict(set)
        self.emitted: list[dict[str, Any]] = []
        self.inbox: dict[str, list[tuple[str, Any]]] = defaultdict(list)

    def on(self, event: str, handler: Any = None) -> None:
        self.handlers[event] = handler

    async def save_session(self, sid: str, session: dict[str, Any]) -> None:
        self.sessions[sid] = dict(session)

    async def get_session(self, sid: str) -> dict[str, Any]:
        if sid not in self.connected:
            raise KeyError(sid)
        return self.sessions.get(sid, {})

    async def enter_room(self, sid: str, room: str) -> None:
        self.room_members[room].add(sid)

    def rooms(self, sid: str) -> list[str]:
        if sid not in self.connected:
            raise KeyError(sid)
        return [sid, *(r for r, members in self.room_members.items() if sid in members)]

    async def emit(
        self,
        event: str,
        data: Any = None,
        *,
        to: str | None = None,
        room: str | None = None,
        skip_sid: str | None = None,
    ) -> None:
        target = to or room
        self.emitted.append(
            {"event": event, "data": data, "target": target, "skip_sid": skip_sid},
        )
        if target is None:
            recipients = set(self.connected)
        elif target in self.connected:
            recipients = {target}
        else:
            recipients = self.room_members.get(target, set()) & self.connected
        for sid in recipients - {skip_sid}:
            self.inbox[sid].append((event, data))

    # Client-side driving helpers

    async def connect(self, sid: str, environ: dict[str, Any] | None = None, auth=None):
        self.connected.add(sid)
        try:
            await self.handlers["connect"](sid, environ or {}, auth)
        except Exception:
            self.connected.discard(sid)
            self.sessions.pop(sid, None)
            raise

    async def send(self, sid: str, event: str, *args: Any) -> Any:
        return await self.handlers[event](sid, *args)

    async def disconnect(self, sid: str, reason: str = "client disconnect") -> None:
        self.connected.discard(sid)
        for members in self.room_members.values():
            members.discard(sid)
        await self.handlers["disconnect"](sid, reason)

    def events_for(self, sid: str, event: str) -> list[Any]:
        return [data for name, data in self.inbox[sid] if name == event]


class FakePresenceStore:
    def __init__(self, *, delay: float = 0, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, bool]] = []
        self.delay = delay
        self.error = error

    async def set_status(self, user_id, *, online, at) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.calls.append((str(user_id), online))
