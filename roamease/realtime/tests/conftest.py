import pytest

from roamease.realtime.auth import ConnectionIdentity
from roamease.realtime.auth import HandshakeRejectedError
from roamease.realtime.auth import RejectReason
from roamease.realtime.auth import SocketAuthenticator
from roamease.realtime.emitter import EventEmitter
from roamease.realtime.gateway import RealtimeGateway
from roamease.realtime.presence import PresenceRegistry
from roamease.realtime.relay import MessageRelay
from roamease.realtime.rooms import RoomMembership
from roamease.realtime.socketio import shutdown_realtime

from .fakes import FakePresenceStore
from .fakes import FakeSocketServer

IDENTITIES = {
    "1": ConnectionIdentity(user_id="1", role="user"),
    "2": ConnectionIdentity(user_id="2", role="logistics"),
    "9": ConnectionIdentity(user_id="9", role="admin"),
}
CONVERSATIONS = {"100": ["1", "2"], "200": ["2", "9"]}


def fake_verify(token: str) -> str:
    if token == "expired":  # noqa: S105
        raise HandshakeRejectedError(RejectReason.JWT_EXPIRED)
    if not token.startswith("token-"):
        raise HandshakeRejectedError(RejectReason.JWT_INVALID)
    return token.removeprefix("token-")


async def fake_lookup(user_id: str) -> ConnectionIdentity:
    try:
        return IDENTITIES[user_id]
    except KeyError:
        raise HandshakeRejectedError(RejectReason.USER_NOT_FOUND) from None


async def fake_participants(conversation_id: str):
    return CONVERSATIONS.get(conversation_id)


@pytest.fixture(autouse=True)
def _reset_realtime():
    yield
    shutdown_realtime()


@pytest.fixture
def server() -> FakeSocketServer:
    return FakeSocketServer()


@pytest.fixture
def store() -> FakePresenceStore:
    return FakePresenceStore()


@pytest.fixture
def gateway(server, store) -> RealtimeGateway:
    registry = PresenceRegistry()
    emitter = EventEmitter(server)
    gateway = RealtimeGateway(
        server,
        registry=registry,
        store=store,
        authenticator=SocketAuthenticator(verify=fake_verify, lookup=fake_lookup),
        emitter=emitter,
        rooms=RoomMembership(server),
        relay=MessageRelay(registry, emitter),
        participants=fake_participants,
        store_timeout=0.5,
    )
    gateway.register()
    return gateway
