"""Global Socket.IO server for the frontend.

One server instance carries presence, notifications, chat relay and the
marketplace broadcasts (new shipments, bids, deliveries).

Frontend convention:
- URL base: ws://<host>:8000
- Socket.IO path: settings.REALTIME_SOCKETIO_PATH
- Auth: `auth.token`, an `Authorization: Bearer` header, or `query.token`
  (JWT access token)

``init_realtime()`` must run once at startup (``config/asgi.py`` does it).
Until then, :func:`get_gateway` and the emitter helpers raise
:class:`RealtimeNotInitializedError`.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from channels.db import database_sync_to_async
from django.conf import settings

from roamease.chat.services import participant_ids

from .auth import SocketAuthenticator
from .emitter import EventEmitter
from .emitter import RealtimeNotInitializedError
from .emitter import install_emitter
from .gateway import RealtimeGateway
from .presence import PresenceRegistry
from .presence import PresenceStore
from .presence import UserPresenceStore
from .relay import MessageRelay
from .rooms import RoomMembership

logger = logging.getLogger(__name__)

_gateway: RealtimeGateway | None = None


def create_server() -> socketio.AsyncServer:
    origins = settings.REALTIME_CORS_ALLOWED_ORIGINS
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins="*" if list(origins) == ["*"] else list(origins),
        logger=False,
        engineio_logger=False,
    )


def init_realtime(
    server: Any | None = None,
    *,
    registry: PresenceRegistry | None = None,
    store: PresenceStore | None = None,
    authenticator: SocketAuthenticator | None = None,
) -> RealtimeGateway:
    """Build the gateway, register its handlers and expose the emitter."""

    global _gateway  # noqa: PLW0603
    server = server if server is not None else create_server()
    registry = registry if registry is not None else PresenceRegistry()
    emitter = EventEmitter(server)
    gateway = RealtimeGateway(
        server,
        registry=registry,
        store=store if store is not None else UserPresenceStore(),
        authenticator=authenticator or SocketAuthenticator(),
        emitter=emitter,
        rooms=RoomMembership(server),
        relay=MessageRelay(registry, emitter),
        participants=database_sync_to_async(participant_ids),
        store_timeout=settings.REALTIME_PRESENCE_STORE_TIMEOUT,
    )
    gateway.register()
    _gateway = gateway
    install_emitter(emitter)
    logger.info("Realtime server initialized")
    return gateway


def shutdown_realtime() -> None:
    global _gateway  # noqa: PLW0603
    _gateway = None
    install_emitter(None)


def get_gateway() -> RealtimeGateway:
    if _gateway is None:
        msg = "Realtime server is not initialized; call init_realtime() at startup."
        raise RealtimeNotInitializedError(msg)
    return _gateway


def is_initialized() -> bool:
    return _gateway is not None


def build_asgi_app(other_asgi_app: Any) -> socketio.ASGIApp:
    # Socket.IO must sit above Django because it uses BOTH:
    # - HTTP long-polling (Engine.IO)
    # - WebSocket upgrades
    gateway = _gateway or init_realtime()
    return socketio.ASGIApp(
        gateway.server,
        other_asgi_app=other_asgi_app,
        socketio_path=settings.REALTIME_SOCKETIO_PATH,
    )
