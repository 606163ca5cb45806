"""Chat persistence and fan-out.

The channel layer is the subscriber registry: every event room is a group, and
every authenticated user owns a personal group used to push subscription
changes to all of that user's live connections.
"""

import typing as t
from uuid import UUID

import structlog
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet

from accounts.models import HuddleUser
from chat.exceptions import ChatNotFoundError
from chat.models import ChatMessage
from chat.schema import ChatMessageOut, ChatMessageSchema
from events.models import Event

logger = structlog.get_logger(__name__)

GLOBAL_GROUP = "chat.global"


def event_group(event_id: UUID | str) -> str:
    """Name of the group holding the subscribers of an event's room."""
    return f"chat.event.{event_id}"


def user_group(user_id: UUID | str) -> str:
    """Name of the group holding every live connection of a user."""
    return f"chat.user.{user_id}"


def broadcast_group(event_id: UUID | str) -> str:
    """The group a message for this event is fanned out to."""
    if settings.CHAT_BROADCAST_SCOPE == "global":
        return GLOBAL_GROUP
    return event_group(event_id)


def subscribed_event_ids(user_id: UUID | str) -> list[str]:
    """Ids of every event the user created or joined."""
    created = Event.objects.created_by(user_id).values_list("id", flat=True)
    joined = Event.objects.joined_by(user_id).values_list("id", flat=True)
    return [str(event_id) for event_id in {*created, *joined}]


def list_messages(event: Event, after: int | None = None) -> QuerySet[ChatMessage]:
    """Messages of an event, oldest first.

    When `after` is given only messages with a greater id are returned.
    """
    qs = ChatMessage.objects.for_event(event.pk)
    if after is not None:
        qs = qs.filter(id__gt=after)
    return qs


def create_message(event_id: UUID | str, user_id: UUID | str, text: str) -> ChatMessage:
    """Persist a message. Its timestamp is assigned here and orders the room.

    Raises:
        ChatNotFoundError: If the event or the user does not exist.
    """
    try:
        event = Event.objects.only("id").get(pk=event_id)
    except Event.DoesNotExist:
        raise ChatNotFoundError(f"Event {event_id} does not exist.")
    try:
        user = HuddleUser.objects.get(pk=user_id)
    except HuddleUser.DoesNotExist:
        raise ChatNotFoundError(f"User {user_id} does not exist.")
    message = ChatMessage.objects.create(event=event, user=user, message=text)
    logger.info("chat_message_persisted", message_id=message.pk, event_id=str(event.pk), user_id=str(user.pk))
    return message


def serialize_message(message: ChatMessage) -> dict[str, t.Any]:
    """The outbound `chat_message` frame for a persisted message."""
    return ChatMessageOut(event_id=message.event_id, data=ChatMessageSchema.from_orm(message)).model_dump(
        mode="json", by_alias=True
    )


async def broadcast(event_id: UUID | str, frame: dict[str, t.Any]) -> None:
    """Fan a frame out to the connections subscribed to the event.

    Delivery is best effort: connections that are gone simply miss it.
    """
    channel_layer = get_channel_layer()
    await channel_layer.group_send(broadcast_group(event_id), {"type": "chat.message", "frame": frame})


def post_message(event: Event, user: HuddleUser, text: str) -> ChatMessage:
    """Persist a message from the HTTP fallback and broadcast it once committed."""
    message = create_message(event.pk, user.pk, text)
    frame = serialize_message(message)
    transaction.on_commit(lambda: async_to_sync(broadcast)(event.pk, frame))
    return message


def subscribe_user(user_id: UUID | str, event_id: UUID | str) -> None:
    """Subscribe all of a user's live connections to an event room."""
    _notify_user(user_id, {"type": "chat.subscribe", "event_id": str(event_id)})


def unsubscribe_user(user_id: UUID | str, event_id: UUID | str) -> None:
    """Remove all of a user's live connections from an event room."""
    _notify_user(user_id, {"type": "chat.unsubscribe", "event_id": str(event_id)})


def _notify_user(user_id: UUID | str, message: dict[str, t.Any]) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(user_group(user_id), message)
