import structlog
from django.db import transaction
from django.db.models import Prefetch, QuerySet

from accounts.models import HuddleUser
from chat import service as chat_service
from events.models import Event, EventPhoto, Participant
from events.schema import EventCreateSchema, EventEditSchema, PhotoCreateSchema

logger = structlog.get_logger(__name__)


@transaction.atomic
def create_event(creator: HuddleUser, payload: EventCreateSchema) -> Event:
    """Create an event and subscribe the creator's live connections to its room."""
    event = Event.objects.create(creator=creator, **payload.to_model_kwargs())
    creator_id, event_id = creator.pk, event.pk
    transaction.on_commit(lambda: chat_service.subscribe_user(creator_id, event_id))
    logger.info("event_created", event_id=str(event.pk), user_id=str(creator.pk))
    return event


@transaction.atomic
def update_event(event: Event, payload: EventEditSchema) -> Event:
    """Replace an event's editable fields, safely within a select_for_update lock."""
    event = Event.objects.select_for_update().get(pk=event.pk)
    for key, value in payload.to_model_kwargs().items():
        setattr(event, key, value)
    event.save()
    logger.info("event_updated", event_id=str(event.pk))
    return event


def delete_event(event: Event) -> None:
    """Delete an event with its participants, photos and messages."""
    event_id = str(event.pk)
    event.delete()
    logger.info("event_deleted", event_id=event_id)


def add_photo(event: Event, user: HuddleUser, payload: PhotoCreateSchema) -> EventPhoto:
    photo = EventPhoto.objects.create(event=event, user=user, photo_url=str(payload.photo_url), caption=payload.caption)
    logger.info("event_photo_added", event_id=str(event.pk), photo_id=photo.pk)
    return photo


def get_participants(event: Event) -> QuerySet[Participant]:
    """Participants of an event in join order."""
    return Participant.objects.filter(event=event).select_related("user").order_by("joined_at", "id")


def get_photos(event: Event) -> QuerySet[EventPhoto]:
    """Photos of an event, newest first."""
    return EventPhoto.objects.filter(event=event).select_related("user").order_by("-created_at", "-id")


def get_user_events(user: HuddleUser) -> QuerySet[Event]:
    """Events created by the user, newest start first."""
    return Event.objects.full().created_by(user.pk).order_by("-start_time", "-created_at")


def get_user_participations(user: HuddleUser) -> QuerySet[Participant]:
    """The user's participations, newest event start first."""
    return (
        Participant.objects.filter(user=user)
        .select_related("event", "event__creator")
        .order_by("-event__start_time", "-joined_at")
    )


def get_user_photos(user: HuddleUser) -> QuerySet[EventPhoto]:
    """Photos uploaded by the user, newest first, each with its event."""
    return (
        EventPhoto.objects.filter(user=user)
        .prefetch_related(Prefetch("event", queryset=Event.objects.full()))
        .order_by("-created_at", "-id")
    )
