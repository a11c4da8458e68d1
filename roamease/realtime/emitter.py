"""Targeted event delivery over the shared Socket.IO server.

Everything that needs to push a realtime event goes through the process-wide
:class:`EventEmitter`. Delivery is fire-and-forget: emitting to a room nobody
is in does nothing. Payloads are passed through untouched.

Sync Django code (signals, views, services) uses the ``emit_event_*`` helpers,
which bridge into the event loop with ``async_to_sync``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from asgiref.sync import async_to_sync

from .constants import NEW_NOTIFICATION
from .rooms import ADMIN_ROOM
from .rooms import room_for_user

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class RealtimeNotInitializedError(RuntimeError):
    """Raised when realtime delivery is used before ``init_realtime()``."""


class EventEmitter:
    """Routing layer over Socket.IO rooms."""

    def __init__(self, server: Any) -> None:
        self._server = server

    async def emit_to_user(self, user_id: Any, event: str, payload: Any) -> None:
        await self._server.emit(event, payload, room=room_for_user(user_id))

    async def emit_to_users(
        self,
        user_ids: Iterable[Any],
        event: str,
        payload: Any,
    ) -> None:
        seen: set[str] = set()
        for user_id in user_ids:
            if user_id is None or str(user_id) in seen:
                continue
            seen.add(str(user_id))
            await self.emit_to_user(user_id, event, payload)

    async def emit_to_admins(self, event: str, payload: Any) -> None:
        await self._server.emit(event, payload, room=ADMIN_ROOM)

    async def emit_to_all(
        self,
        event: str,
        payload: Any,
        *,
        skip_sid: str | None = None,
    ) -> None:
        await self._server.emit(event, payload, skip_sid=skip_sid)

    async def emit_to_sid(self, sid: str, event: str, payload: Any) -> None:
        await self._server.emit(event, payload, to=sid)

    async def emit_notification(
        self,
        user_id: Any,
        payload: dict[str, Any],
        *,
        admin_copy: bool = False,
    ) -> None:
        """Deliver ``new-notification`` to the user, plus the admin room if asked.

        The two deliveries are independent: an admin who is also the recipient
        receives both.
        """

        await self.emit_to_user(user_id, NEW_NOTIFICATION, payload)
        if admin_copy:
            await self.emit_to_admins(NEW_NOTIFICATION, payload)
        logger.debug(
            "Notification %s emitted to user %s (admin copy: %s)",
            payload.get("id"),
            user_id,
            admin_copy,
        )


_emitter: EventEmitter | None = None


def install_emitter(emitter: EventEmitter | None) -> None:
    global _emitter  # noqa: PLW0603
    _emitter = emitter


def get_emitter() -> EventEmitter:
    if _emitter is None:
        msg = "Realtime server is not initialized; call init_realtime() at startup."
        raise RealtimeNotInitializedError(msg)
    return _emitter


def emit_event_to_user(user_id: Any, event: str, payload: Any) -> None:
    """Emit an event to one user's room from sync Django code."""

    async_to_sync(get_emitter().emit_to_user)(user_id, event, payload)


def emit_event_to_users(user_ids: Iterable[Any], event: str, payload: Any) -> None:
    async_to_sync(get_emitter().emit_to_users)(list(user_ids), event, payload)


def emit_event_to_admins(event: str, payload: Any) -> None:
    async_to_sync(get_emitter().emit_to_admins)(event, payload)


def broadcast_event(event: str, payload: Any) -> None:
    """Emit an event to every connected client."""

    async_to_sync(get_emitter().emit_to_all)(event, payload)


def emit_notification_to_user(
    user_id: Any,
    payload: dict[str, Any],
    *,
    admin_copy: bool = False,
) -> None:
    async_to_sync(get_emitter().emit_notification)(
        user_id,
        payload,
        admin_copy=admin_copy,
    )
