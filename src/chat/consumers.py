"""The realtime chat endpoint.

Each connection handles its frames strictly in arrival order. Database work is
pushed to a thread with `database_sync_to_async` so the event loop never blocks.
"""

import asyncio
import typing as t

import orjson
import structlog
from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.conf import settings
from django.db import DatabaseError
from pydantic import ValidationError

from chat import service
from chat.exceptions import ChatError, ChatNotFoundError, ForbiddenFrameError, MalformedFrameError, TransientChatError
from chat.schema import ChatMessageFrame, ErrorFrame, SubscribeFrame, UnsubscribeFrame, inbound_frame_adapter
from events.models import Event

logger = structlog.get_logger(__name__)

# Close code for connections presenting an invalid token.
CLOSE_UNAUTHORIZED = 4401


class ChatConsumer(AsyncJsonWebsocketConsumer):  # type: ignore[misc]
    """One live client connection.

    Inbound frames: `chat_message`, `subscribe`, `unsubscribe`.
    Outbound frames: `chat_message` and `error`. A bad frame is answered with an
    `error` frame to this connection only; the connection stays open.
    """

    async def connect(self) -> None:
        """Accept the connection and subscribe it to the user's rooms."""
        self.user = self.scope.get("user")
        self.rooms: set[str] = set()
        self.log = logger.bind(channel_name=self.channel_name)

        if self.scope.get("auth_error"):
            self.log.info("realtime_connection_rejected", reason=self.scope["auth_error"])
            await self.close(code=CLOSE_UNAUTHORIZED)
            return

        await self.accept()

        if settings.CHAT_BROADCAST_SCOPE == "global":
            await self._join_group(service.GLOBAL_GROUP)

        if self.is_authenticated:
            self.log = self.log.bind(user_id=str(self.user.pk))
            await self._join_group(service.user_group(self.user.pk))
            for event_id in await database_sync_to_async(service.subscribed_event_ids)(self.user.pk):
                await self._join_group(service.event_group(event_id))

        self.log.info("realtime_connected", rooms=len(self.rooms))

    async def disconnect(self, code: int) -> None:
        """Discard every group membership of this connection."""
        for group in list(getattr(self, "rooms", ())):
            await self.channel_layer.group_discard(group, self.channel_name)
        self.rooms = set()
        if hasattr(self, "log"):
            self.log.info("realtime_disconnected", code=code)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user is not None and self.user.is_authenticated)

    # --- inbound ---

    async def receive(self, text_data: str | None = None, bytes_data: bytes | None = None, **kwargs: t.Any) -> None:
        """Decode a frame, reporting undecodable input instead of failing the connection."""
        if text_data is None:
            await self.send_error(MalformedFrameError("Only JSON text frames are supported."))
            return
        try:
            content = await self.decode_json(text_data)
        except ValueError:
            await self.send_error(MalformedFrameError("Frame is not valid JSON."))
            return
        await self.receive_json(content, **kwargs)

    async def receive_json(self, content: t.Any, **kwargs: t.Any) -> None:
        """Validate and dispatch a decoded frame."""
        try:
            frame = inbound_frame_adapter.validate_python(content)
        except ValidationError as exc:
            self.log.info("realtime_frame_rejected", errors=exc.errors(include_url=False, include_context=False))
            await self.send_error(MalformedFrameError(_describe(exc)))
            return

        try:
            if isinstance(frame, ChatMessageFrame):
                await self.handle_chat_message(frame)
            elif isinstance(frame, SubscribeFrame):
                await self.handle_subscribe(frame)
            elif isinstance(frame, UnsubscribeFrame):
                await self.handle_unsubscribe(frame)
        except ChatError as exc:
            self.log.info("realtime_frame_failed", code=exc.code, error=exc.message)
            await self.send_error(exc)

    async def handle_chat_message(self, frame: ChatMessageFrame) -> None:
        """Persist the message, then fan it out to the event's room.

        The sender is subscribed first so that it receives its own echo.
        """
        if self.is_authenticated and frame.user_id != self.user.pk:
            raise ForbiddenFrameError("userId does not match the authenticated user.")

        try:
            message = await asyncio.wait_for(
                database_sync_to_async(service.create_message)(frame.event_id, frame.user_id, frame.message),
                timeout=settings.CHAT_PERSIST_TIMEOUT,
            )
        except asyncio.TimeoutError:
            self.log.warning("chat_message_persist_timeout", event_id=str(frame.event_id))
            raise TransientChatError("Saving the message timed out, please retry.")
        except DatabaseError:
            self.log.exception("chat_message_persist_failed", event_id=str(frame.event_id))
            raise TransientChatError("Saving the message failed, please retry.")

        await self._join_group(service.event_group(frame.event_id))
        payload = await database_sync_to_async(service.serialize_message)(message)
        await service.broadcast(frame.event_id, payload)

    async def handle_subscribe(self, frame: SubscribeFrame) -> None:
        """Subscribe this connection to an existing event's room."""
        exists = await database_sync_to_async(Event.objects.filter(pk=frame.event_id).exists)()
        if not exists:
            raise ChatNotFoundError(f"Event {frame.event_id} does not exist.")
        await self._join_group(service.event_group(frame.event_id))

    async def handle_unsubscribe(self, frame: UnsubscribeFrame) -> None:
        """Unsubscribe this connection from an event's room. Unknown rooms are ignored."""
        await self._leave_group(service.event_group(frame.event_id))

    # --- channel layer handlers ---

    async def chat_message(self, event: dict[str, t.Any]) -> None:
        """Deliver a broadcast frame to the client."""
        await self.send_json(event["frame"])

    async def chat_subscribe(self, event: dict[str, t.Any]) -> None:
        """The user joined or created an event on another channel."""
        await self._join_group(service.event_group(event["event_id"]))

    async def chat_unsubscribe(self, event: dict[str, t.Any]) -> None:
        """The user left an event on another channel."""
        await self._leave_group(service.event_group(event["event_id"]))

    # --- helpers ---

    async def send_error(self, exc: ChatError) -> None:
        await self.send_json(ErrorFrame(code=exc.code, message=exc.message).model_dump())

    async def _join_group(self, group: str) -> None:
        if group in self.rooms:
            return
        await self.channel_layer.group_add(group, self.channel_name)
        self.rooms.add(group)

    async def _leave_group(self, group: str) -> None:
        if group not in self.rooms:
            return
        await self.channel_layer.group_discard(group, self.channel_name)
        self.rooms.discard(group)

    @classmethod
    async def decode_json(cls, text_data: str) -> t.Any:
        return orjson.loads(text_data)

    @classmethod
    async def encode_json(cls, content: t.Any) -> str:
        return orjson.dumps(content).decode()


def _describe(exc: ValidationError) -> str:
    """A short, client-facing summary of a frame validation error."""
    first = exc.errors(include_url=False)[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "frame"
    return f"{location}: {first.get('msg', 'invalid')}"
