"""Online-user bookkeeping.

The in-memory :class:`PresenceRegistry` is authoritative for realtime delivery.
The durable ``is_online``/``last_seen`` columns on the user are advisory and
written best-effort through a :class:`PresenceStore` with a bounded timeout.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Protocol

from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model
from django.utils import timezone

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """Map each user to its single live connection (last writer wins).

    A reverse ``sid -> user_id`` index lets a disconnect be resolved from the
    sid alone. Removal only happens when the user's entry still points at the
    disconnecting sid, so a late disconnect of a replaced connection never
    erases the newer session.
    """

    def __init__(self) -> None:
        self._sid_by_user: dict[str, str] = {}
        self._user_by_sid: dict[str, str] = {}

    def mark_online(self, user_id: str, sid: str) -> str | None:
        """Point ``user_id`` at ``sid``. Returns the sid it replaced, if any."""

        user_id = str(user_id)
        previous = self._sid_by_user.get(user_id)
        self._sid_by_user[user_id] = sid
        self._user_by_sid[sid] = user_id
        if previous is not None and previous != sid:
            logger.info(
                "User %s reconnected: socket %s replaces %s",
                user_id,
                sid,
                previous,
            )
        return previous if previous != sid else None

    def mark_offline(self, sid: str) -> str | None:
        """Drop the entry owned by ``sid``.

        Returns the user id when an entry was removed, ``None`` when the sid
        was unknown or no longer owns its user's entry.
        """

        user_id = self._user_by_sid.pop(sid, None)
        if user_id is None:
            return None
        if self._sid_by_user.get(user_id) != sid:
            logger.debug(
                "Ignoring stale disconnect of %s for user %s",
                sid,
                user_id,
            )
            return None
        del self._sid_by_user[user_id]
        return user_id

    def is_online(self, user_id: str) -> bool:
        return str(user_id) in self._sid_by_user

    def sid_for(self, user_id: str) -> str | None:
        return self._sid_by_user.get(str(user_id))

    def online_user_ids(self) -> set[str]:
        return set(self._sid_by_user)

    def snapshot(self) -> list[str]:
        return list(self._sid_by_user)

    def __len__(self) -> int:
        return len(self._sid_by_user)


class PresenceStore(Protocol):
    async def set_status(self, user_id: str, *, online: bool, at: datetime) -> None:
        ...


class UserPresenceStore:
    """Persist presence onto the user row."""

    async def set_status(self, user_id: str, *, online: bool, at: datetime) -> None:
        await _update_user_presence(user_id, online=online, at=at)


@database_sync_to_async
def _update_user_presence(user_id: str, *, online: bool, at: datetime) -> int:
    user_model = get_user_model()
    return user_model.objects.filter(pk=user_id).update(
        is_online=online,
        last_seen=at,
    )


async def record_presence(
    store: PresenceStore,
    user_id: str,
    *,
    online: bool,
    timeout: float,
) -> bool:
    """Write presence to ``store`` without ever failing the caller.

    Returns ``True`` when the write completed within ``timeout`` seconds.
    """

    state = "online" if online else "offline"
    try:
        await asyncio.wait_for(
            store.set_status(user_id, online=online, at=timezone.now()),
            timeout=timeout,
        )
    except TimeoutError:
        logger.warning(
            "Timed out after %.1fs recording user %s as %s",
            timeout,
            user_id,
            state,
        )
        return False
    except Exception:  # noqa: BLE001 - durable presence is advisory
        logger.warning("Failed to record user %s as %s", user_id, state, exc_info=True)
        return False
    logger.info("User %s is now %s", user_id, state)
    return True
