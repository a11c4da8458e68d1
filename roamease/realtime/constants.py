"""Socket.IO event names shared with the frontend."""

# Client -> server
DECLARE_ONLINE = "user-online"
REQUEST_ONLINE_USERS = "get-online-users"
RELAY_MESSAGE = "broadcast-message"

# Server -> client
ONLINE_USERS = "online-users"
USER_ONLINE = "user-online"
USER_OFFLINE = "user-offline"
NEW_NOTIFICATION = "new-notification"
RECEIVE_MESSAGE = "receive-message"
