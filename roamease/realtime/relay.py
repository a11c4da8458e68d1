from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from .constants import RECEIVE_MESSAGE

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from .emitter import EventEmitter
    from .presence import PresenceRegistry

logger = logging.getLogger(__name__)


class MessageRelay:
    """Push a chat message straight to the other participants' live sockets.

    Unlike room delivery this targets the exact connection recorded in the
    presence registry, and never the sender's own connection. Callers relay
    exactly once per persisted message; relaying twice delivers twice.
    """

    def __init__(self, registry: PresenceRegistry, emitter: EventEmitter) -> None:
        self._registry = registry
        self._emitter = emitter

    async def relay_message(
        self,
        participants: Iterable[Any],
        sender_user_id: Any,
        message: dict[str, Any],
        *,
        conversation_id: str | None = None,
        sender_sid: str | None = None,
    ) -> int:
        """Deliver ``message`` and return how many sockets it went to."""

        sender = str(sender_user_id)
        payload = dict(message)
        if conversation_id is not None:
            payload["conversationId"] = conversation_id

        delivered = 0
        seen: set[str] = set()
        for participant in participants:
            participant_id = str(participant)
            if participant_id == sender or participant_id in seen:
                continue
            seen.add(participant_id)
            sid = self._registry.sid_for(participant_id)
            if sid is None or sid == sender_sid:
                logger.debug("Skipping offline participant %s", participant_id)
                continue
            await self._emitter.emit_to_sid(sid, RECEIVE_MESSAGE, payload)
            delivered += 1
        return delivered
