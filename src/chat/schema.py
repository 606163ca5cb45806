"""Chat schemas: the HTTP payloads and the realtime frame envelope."""

import typing as t
from uuid import UUID

from django.conf import settings
from ninja import ModelSchema, Schema
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from accounts.schema import MinimalHuddleUserSchema
from chat.models import ChatMessage


def _validate_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Message cannot be empty.")
    if len(value) > settings.CHAT_MESSAGE_MAX_LENGTH:
        raise ValueError(f"Message cannot be longer than {settings.CHAT_MESSAGE_MAX_LENGTH} characters.")
    return value


class ChatMessageSchema(ModelSchema):
    event_id: UUID
    user: MinimalHuddleUserSchema

    class Meta:
        model = ChatMessage
        fields = ["id", "message", "created_at"]


class MessageCreateSchema(Schema):
    message: str

    @field_validator("message")
    @classmethod
    def validate_message(cls, value: str) -> str:
        """Strip the text and enforce the length bounds."""
        return _validate_text(value)


# Realtime frames. Field names are camelCase on the wire.


class _Frame(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ChatMessageFrame(_Frame):
    type: t.Literal["chat_message"]
    event_id: UUID = Field(alias="eventId")
    user_id: UUID = Field(alias="userId")
    message: str

    @field_validator("message")
    @classmethod
    def validate_message(cls, value: str) -> str:
        """Strip the text and enforce the length bounds."""
        return _validate_text(value)


class SubscribeFrame(_Frame):
    type: t.Literal["subscribe"]
    event_id: UUID = Field(alias="eventId")


class UnsubscribeFrame(_Frame):
    type: t.Literal["unsubscribe"]
    event_id: UUID = Field(alias="eventId")


InboundFrame = t.Annotated[ChatMessageFrame | SubscribeFrame | UnsubscribeFrame, Field(discriminator="type")]

inbound_frame_adapter: TypeAdapter[ChatMessageFrame | SubscribeFrame | UnsubscribeFrame] = TypeAdapter(InboundFrame)


class ChatMessageOut(Schema):
    """Broadcast frame. `eventId` sits at the top level so clients can filter without unpacking `data`."""

    type: t.Literal["chat_message"] = "chat_message"
    event_id: UUID = Field(serialization_alias="eventId")
    data: ChatMessageSchema


class ErrorFrame(Schema):
    type: t.Literal["error"] = "error"
    code: str
    message: str
