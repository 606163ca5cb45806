class ChatError(Exception):
    """Base class for errors reported to a realtime client as an `error` frame."""

    code = "error"

    def __init__(self, message: str) -> None:
        """Store the client-facing message."""
        self.message = message
        super().__init__(message)


class MalformedFrameError(ChatError):
    """The inbound frame is not valid JSON or does not match any known frame type."""

    code = "malformed_frame"


class ForbiddenFrameError(ChatError):
    """The frame claims an identity other than the authenticated user's."""

    code = "forbidden"


class ChatNotFoundError(ChatError):
    """The referenced event or user does not exist."""

    code = "not_found"


class TransientChatError(ChatError):
    """Persisting the message failed or timed out; the client may resend."""

    code = "transient"
