"""Event, participation and photo schemas."""

import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, ConfigDict, Field, HttpUrl, field_validator, model_validator
from pydantic.alias_generators import to_camel

from accounts.schema import MinimalHuddleUserSchema
from common.schema import OneToSixtyFourString, OneToTwoFiftyFiveString, StrippedString
from events.models import Event, EventPhoto, Participant


def _normalize_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    return list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))


class EventEditSchema(Schema):
    """Full replacement of an event's editable fields.

    Optional fields that are omitted are cleared. Field names are accepted in
    snake_case or camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: OneToTwoFiftyFiveString
    description: StrippedString = ""
    event_type: Event.EventType = Event.EventType.OTHER
    status: Event.EventStatus = Event.EventStatus.UPCOMING
    start_time: AwareDatetime
    end_time: AwareDatetime | None = None
    location: OneToTwoFiftyFiveString
    meeting_spot: StrippedString = ""
    max_capacity: int | None = Field(None, ge=1, description="Maximum number of participants (null = unlimited)")
    tags: list[OneToSixtyFourString] = Field(default_factory=list)
    image_url: HttpUrl | None = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: list[str]) -> list[str]:
        """Drop duplicate tags, keeping the first occurrence."""
        return _normalize_tags(tags) or []

    @model_validator(mode="after")
    def check_time_window(self) -> t.Self:
        """The end of an event cannot precede its start."""
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time.")
        return self

    def to_model_kwargs(self) -> dict[str, t.Any]:
        """Plain values ready to be assigned to an Event."""
        data = self.model_dump()
        data["image_url"] = str(self.image_url) if self.image_url else ""
        return data


class EventCreateSchema(EventEditSchema):
    """Fields of a new event. New events start out `upcoming` unless told otherwise."""


class EventSchema(Schema):
    id: UUID
    title: str
    description: str
    event_type: Event.EventType
    status: Event.EventStatus
    start_time: AwareDatetime
    end_time: AwareDatetime | None = None
    location: str
    meeting_spot: str
    max_capacity: int | None = None
    tags: list[str]
    image_url: str
    creator: MinimalHuddleUserSchema
    participant_count: int
    created_at: AwareDatetime
    updated_at: AwareDatetime

    @staticmethod
    def resolve_participant_count(obj: Event) -> int:
        """Use the queryset annotation when present."""
        count = getattr(obj, "participant_count", None)
        if count is None:
            return obj.participants.count()
        return int(count)


class ParticipantSchema(ModelSchema):
    """A participant as listed on an event."""

    user: MinimalHuddleUserSchema

    class Meta:
        model = Participant
        fields = ["id", "joined_at"]


class ParticipationSchema(ModelSchema):
    """A participation as seen by the participating user."""

    event: EventSchema

    class Meta:
        model = Participant
        fields = ["id", "joined_at"]


class PhotoCreateSchema(Schema):
    photo_url: HttpUrl
    caption: StrippedString = Field("", max_length=500)


class EventPhotoSchema(ModelSchema):
    event_id: UUID
    user: MinimalHuddleUserSchema

    class Meta:
        model = EventPhoto
        fields = ["id", "photo_url", "caption", "created_at"]


class UserPhotoSchema(ModelSchema):
    """A photo as seen by its uploader, with the event it was shared on."""

    event: EventSchema

    class Meta:
        model = EventPhoto
        fields = ["id", "photo_url", "caption", "created_at"]
