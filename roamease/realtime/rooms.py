from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admin_room"


def room_for_user(user_id: Any) -> str:
    return f"user_{user_id}"


class RoomMembership:
    """Place online connections into their addressable rooms.

    Membership itself lives in the Socket.IO client manager. Entering a room
    twice is a no-op there, so both joins are idempotent.
    """

    def __init__(self, server: Any) -> None:
        self._server = server

    async def join_user_room(self, sid: str, user_id: str) -> str:
        room = room_for_user(user_id)
        await self._server.enter_room(sid, room)
        logger.info("Socket %s joined room %s", sid, room)
        return room

    async def join_admin_room(self, sid: str, *, is_admin: bool) -> bool:
        if not is_admin:
            return False
        await self._server.enter_room(sid, ADMIN_ROOM)
        logger.info("Socket %s joined room %s", sid, ADMIN_ROOM)
        return True

    def rooms_of(self, sid: str) -> list[str]:
        """Rooms the connection is in, for diagnostics only."""

        try:
            return sorted(r for r in self._server.rooms(sid) if r != sid)
        except (KeyError, ValueError):
            return []
