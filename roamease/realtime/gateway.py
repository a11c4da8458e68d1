"""Socket.IO connection lifecycle.

Per connection: ``connect`` (token gate) -> ``user-online`` (registry entry,
room joins, presence broadcast) -> ``disconnect`` (race-checked removal).
A rejected handshake never reaches the registry or any room.

Between the registry write and the room joins nothing awaits real I/O, so a
concurrent disconnect cannot interleave with them. The durable presence write
is always the last step of a handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefusedError

from .auth import ConnectionIdentity
from .auth import HandshakeRejectedError
from .constants import DECLARE_ONLINE
from .constants import ONLINE_USERS
from .constants import RELAY_MESSAGE
from .constants import REQUEST_ONLINE_USERS
from .constants import USER_OFFLINE
from .constants import USER_ONLINE
from .presence import record_presence

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable

    from .auth import SocketAuthenticator
    from .emitter import EventEmitter
    from .presence import PresenceRegistry
    from .presence import PresenceStore
    from .relay import MessageRelay
    from .rooms import RoomMembership

    ParticipantsLookup = Callable[[str], Awaitable["list[str] | None"]]

logger = logging.getLogger(__name__)


class RealtimeGateway:
    def __init__(  # noqa: PLR0913
        self,
        server: Any,
        *,
        registry: PresenceRegistry,
        store: PresenceStore,
        authenticator: SocketAuthenticator,
        emitter: EventEmitter,
        rooms: RoomMembership,
        relay: MessageRelay,
        participants: ParticipantsLookup,
        store_timeout: float,
    ) -> None:
        self.server = server
        self.registry = registry
        self.store = store
        self.authenticator = authenticator
        self.emitter = emitter
        self.rooms = rooms
        self.relay = relay
        self._participants = participants
        self._store_timeout = store_timeout

    def register(self) -> None:
        self.server.on("connect", handler=self.on_connect)
        self.server.on("disconnect", handler=self.on_disconnect)
        self.server.on(DECLARE_ONLINE, handler=self.on_declare_online)
        self.server.on(REQUEST_ONLINE_USERS, handler=self.on_request_online_users)
        self.server.on(RELAY_MESSAGE, handler=self.on_relay_message)

    async def _identity(self, sid: str) -> ConnectionIdentity | None:
        try:
            session = await self.server.get_session(sid)
        except KeyError:
            # Already disconnected.
            return None
        return ConnectionIdentity.from_session(session)

    async def on_connect(self, sid: str, environ: dict[str, Any], auth: Any = None):
        # `auth` may be omitted depending on the client/transport.
        try:
            identity = await self.authenticator.authenticate(environ, auth)
        except HandshakeRejectedError as exc:
            logger.warning("Socket %s rejected: %s", sid, exc.reason.value)
            raise SocketConnectionRefusedError(exc.reason.value) from exc

        await self.server.save_session(sid, identity.as_session())
        logger.info("Socket %s authenticated as user %s", sid, identity.user_id)

    async def on_declare_online(self, sid: str, user_id_hint: Any = None) -> None:
        identity = await self._identity(sid)
        if identity is None:
            logger.warning("Ignoring %s from unauthenticated socket %s", DECLARE_ONLINE, sid)
            return
        # The handshake identity is authoritative; the client hint is ignored.
        if user_id_hint is not None and str(user_id_hint) != identity.user_id:
            logger.warning(
                "Socket %s declared user %s but is authenticated as %s",
                sid,
                user_id_hint,
                identity.user_id,
            )

        self.registry.mark_online(identity.user_id, sid)
        await self.rooms.join_user_room(sid, identity.user_id)
        await self.rooms.join_admin_room(sid, is_admin=identity.is_admin)
        logger.debug("Socket %s is in rooms %s", sid, self.rooms.rooms_of(sid))

        await self.server.emit(USER_ONLINE, identity.user_id, skip_sid=sid)
        await self.server.emit(ONLINE_USERS, self.registry.snapshot(), to=sid)

        await record_presence(
            self.store,
            identity.user_id,
            online=True,
            timeout=self._store_timeout,
        )

    async def on_request_online_users(self, sid: str, *args: Any) -> None:
        if await self._identity(sid) is None:
            return
        await self.server.emit(ONLINE_USERS, self.registry.snapshot(), to=sid)

    async def on_relay_message(self, sid: str, data: Any = None) -> int:
        identity = await self._identity(sid)
        if identity is None:
            return 0
        if not isinstance(data, dict):
            logger.warning("Malformed %s payload from socket %s", RELAY_MESSAGE, sid)
            return 0
        message = data.get("message")
        conversation_id = data.get("conversationId")
        if not isinstance(message, dict) or conversation_id in (None, ""):
            logger.warning("Malformed %s payload from socket %s", RELAY_MESSAGE, sid)
            return 0

        conversation_id = str(conversation_id)
        participants = await self._participants(conversation_id)
        if participants is None:
            logger.info("Conversation %s not found; message not relayed", conversation_id)
            return 0
        if identity.user_id not in participants:
            logger.warning(
                "User %s is not a participant of conversation %s",
                identity.user_id,
                conversation_id,
            )
            return 0

        return await self.relay.relay_message(
            participants,
            identity.user_id,
            message,
            conversation_id=conversation_id,
            sender_sid=sid,
        )

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        user_id = self.registry.mark_offline(sid)
        if user_id is None:
            # Never declared online, or replaced by a newer connection.
            logger.debug("Socket %s disconnected (%s)", sid, reason)
            return

        await self.server.emit(USER_OFFLINE, user_id, skip_sid=sid)
        await record_presence(
            self.store,
            user_id,
            online=False,
            timeout=self._store_timeout,
        )
