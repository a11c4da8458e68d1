import logging

import pytest
from asgiref.sync import async_to_sync
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefusedError

from roamease.realtime.constants import DECLARE_ONLINE
from roamease.realtime.constants import ONLINE_USERS
from roamease.realtime.constants import RECEIVE_MESSAGE
from roamease.realtime.constants import RELAY_MESSAGE
from roamease.realtime.constants import REQUEST_ONLINE_USERS
from roamease.realtime.constants import USER_OFFLINE
from roamease.realtime.constants import USER_ONLINE
from roamease.realtime.rooms import ADMIN_ROOM

from .fakes import FakePresenceStore


def connect(server, sid, token):
    async_to_sync(server.connect)(sid, {}, {"token": token})


def go_online(server, sid, token, hint=None):
    connect(server, sid, token)
    async_to_sync(server.send)(sid, DECLARE_ONLINE, hint)


def send(server, sid, event, *args):
    return async_to_sync(server.send)(sid, event, *args)


def disconnect(server, sid):
    async_to_sync(server.disconnect)(sid)


def test_register_wires_all_events(server, gateway):
    assert set(server.handlers) == {
        "connect",
        "disconnect",
        DECLARE_ONLINE,
        REQUEST_ONLINE_USERS,
        RELAY_MESSAGE,
    }


@pytest.mark.parametrize(
    ("token", "reason"),
    [
        (None, "token_missing"),
        ("garbage", "jwt_invalid"),
        ("expired", "jwt_expired"),
        ("token-404", "user_not_found"),
    ],
)
def test_rejected_handshake_reports_reason(server, gateway, token, reason):
    with pytest.raises(SocketConnectionRefusedError) as excinfo:
        connect(server, "sid-x", token)
    assert excinfo.value.error_args["message"] == reason
    assert "sid-x" not in server.sessions
    assert not server.room_members
    assert len(gateway.registry) == 0


def test_rejected_socket_cannot_declare_online(server, gateway):
    with pytest.raises(SocketConnectionRefusedError):
        connect(server, "sid-x", "garbage")
    send(server, "sid-x", DECLARE_ONLINE, "1")
    assert len(gateway.registry) == 0
    assert not server.room_members


def test_connect_stores_identity_without_going_online(server, gateway):
    connect(server, "sid-1", "token-1")
    assert server.sessions["sid-1"] == {"user_id": "1", "role": "user"}
    assert not gateway.registry.is_online("1")


def test_declare_online_joins_rooms_and_broadcasts(server, gateway, store):
    go_online(server, "sid-2", "token-2")
    go_online(server, "sid-1", "token-1")

    assert server.room_members["user_1"] == {"sid-1"}
    assert "sid-1" not in server.room_members[ADMIN_ROOM]
    # Everyone but the new connection hears about it.
    assert server.events_for("sid-2", USER_ONLINE) == ["1"]
    assert server.events_for("sid-1", USER_ONLINE) == []
    assert sorted(server.events_for("sid-1", ONLINE_USERS)[-1]) == ["1", "2"]
    assert store.calls == [("2", True), ("1", True)]


def test_admin_joins_admin_room(server, gateway):
    go_online(server, "sid-9", "token-9")
    assert server.room_members[ADMIN_ROOM] == {"sid-9"}
    assert server.room_members["user_9"] == {"sid-9"}


def test_declared_user_id_is_ignored(server, gateway, caplog):
    with caplog.at_level(logging.WARNING, logger="roamease.realtime.gateway"):
        go_online(server, "sid-1", "token-1", hint="2")
    assert gateway.registry.sid_for("1") == "sid-1"
    assert not gateway.registry.is_online("2")
    assert "declared user 2" in caplog.text


def test_online_users_snapshot_round_trip(server, gateway):
    go_online(server, "sid-1", "token-1")
    go_online(server, "sid-2", "token-2")

    send(server, "sid-1", REQUEST_ONLINE_USERS)

    assert sorted(server.events_for("sid-1", ONLINE_USERS)[-1]) == ["1", "2"]


def test_message_relay_between_two_users(server, gateway):
    go_online(server, "sid-1", "token-1")
    go_online(server, "sid-2", "token-2")

    delivered = send(
        server,
        "sid-1",
        RELAY_MESSAGE,
        {"message": {"id": 1, "text": "hello"}, "conversationId": "100"},
    )

    assert delivered == 1
    assert server.events_for("sid-2", RECEIVE_MESSAGE) == [
        {"id": 1, "text": "hello", "conversationId": "100"},
    ]
    assert server.events_for("sid-1", RECEIVE_MESSAGE) == []


@pytest.mark.parametrize(
    "data",
    [
        None,
        "text",
        {"message": {"text": "x"}},
        {"conversationId": "100"},
        {"message": "x", "conversationId": "100"},
    ],
)
def test_malformed_relay_is_dropped(server, gateway, data):
    go_online(server, "sid-1", "token-1")
    go_online(server, "sid-2", "token-2")
    assert send(server, "sid-1", RELAY_MESSAGE, data) == 0
    assert server.events_for("sid-2", RECEIVE_MESSAGE) == []


def test_relay_to_unknown_conversation(server, gateway):
    go_online(server, "sid-1", "token-1")
    payload = {"message": {"text": "x"}, "conversationId": "999"}
    assert send(server, "sid-1", RELAY_MESSAGE, payload) == 0


def test_relay_requires_sender_participation(server, gateway):
    go_online(server, "sid-1", "token-1")
    go_online(server, "sid-2", "token-2")
    go_online(server, "sid-9", "token-9")
    payload = {"message": {"text": "x"}, "conversationId": "200"}
    assert send(server, "sid-1", RELAY_MESSAGE, payload) == 0
    assert server.events_for("sid-2", RECEIVE_MESSAGE) == []


def test_disconnect_marks_offline(server, gateway, store):
    go_online(server, "sid-1", "token-1")
    go_online(server, "sid-2", "token-2")

    disconnect(server, "sid-1")

    assert not gateway.registry.is_online("1")
    assert server.events_for("sid-2", USER_OFFLINE) == ["1"]
    assert store.calls[-1] == ("1", False)


def test_reconnect_race_keeps_new_connection(server, gateway, store):
    go_online(server, "sid-2", "token-2")
    go_online(server, "old", "token-1")
    go_online(server, "new", "token-1")

    # The replaced socket disconnects after the new one declared itself.
    disconnect(server, "old")

    assert gateway.registry.sid_for("1") == "new"
    assert server.events_for("sid-2", USER_OFFLINE) == []
    assert ("1", False) not in store.calls

    payload = {"message": {"text": "still here?"}, "conversationId": "100"}
    send(server, "sid-2", RELAY_MESSAGE, payload)
    assert server.events_for("new", RECEIVE_MESSAGE) == [
        {"text": "still here?", "conversationId": "100"},
    ]


def test_disconnect_before_declaring_online(server, gateway, store):
    connect(server, "sid-1", "token-1")
    disconnect(server, "sid-1")
    assert server.emitted == []
    assert store.calls == []


def test_slow_store_does_not_block_presence(server, gateway):
    gateway.store = FakePresenceStore(delay=5)
    go_online(server, "sid-1", "token-1")
    assert gateway.registry.is_online("1")
    assert server.room_members["user_1"] == {"sid-1"}


def test_failing_store_does_not_break_disconnect(server, gateway):
    go_online(server, "sid-1", "token-1")
    gateway.store = FakePresenceStore(error=RuntimeError("db down"))
    disconnect(server, "sid-1")
    assert not gateway.registry.is_online("1")


def test_unauthenticated_socket_gets_no_snapshot(server, gateway):
    go_online(server, "sid-1", "token-1")
    with pytest.raises(SocketConnectionRefusedError):
        connect(server, "sid-x", "garbage")

    send(server, "sid-x", REQUEST_ONLINE_USERS)

    assert server.events_for("sid-x", ONLINE_USERS) == []
    assert all(e["target"] != "sid-x" for e in server.emitted)
