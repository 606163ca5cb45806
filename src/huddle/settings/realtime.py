from decouple import Choices, config

# Realtime chat runs in a single ASGI process; the in-memory layer holds the
# per-event subscriber groups.
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    },
}

# Seconds to wait for a chat message to be persisted before reporting a transient failure.
CHAT_PERSIST_TIMEOUT = config("CHAT_PERSIST_TIMEOUT", default=5.0, cast=float)

# "event": fan out to the subscribers of the message's event.
# "global": fan out to every open connection; clients filter by eventId.
CHAT_BROADCAST_SCOPE = config("CHAT_BROADCAST_SCOPE", default="event", cast=Choices(["event", "global"]))

CHAT_MESSAGE_MAX_LENGTH = config("CHAT_MESSAGE_MAX_LENGTH", default=2000, cast=int)
