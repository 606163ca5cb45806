import typing as t
from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route, status
from ninja_extra.searching import Searching, searching

from common.authentication import HuddleJWTAuth
from common.controllers import UserAwareController
from common.schema import ResponseMessage, ValidationErrorResponse
from common.throttling import WriteThrottle
from events import filters, models, schema
from events.service import event_service
from events.service.participation import ParticipationManager

from .permissions import EventCreatorPermission


@api_controller("/events", auth=HuddleJWTAuth(), tags=["Events"])
class EventController(UserAwareController):
    def get_queryset(self) -> models.EventQuerySet:
        return models.Event.objects.full()

    def get_one(self, event_id: UUID) -> models.Event:
        """Fetch an event, checking the route's object permissions."""
        return t.cast(models.Event, self.get_object_or_exception(self.get_queryset(), pk=event_id))

    @route.get("", url_name="list_events", response=list[schema.EventSchema])
    @searching(Searching, search_fields=["title", "description", "location", "tags"])
    def list_events(
        self,
        params: filters.EventFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Event]:
        """Browse events, newest start time first.

        `search` matches a substring of the title, description, location or tags.
        Narrow the list further with `event_type`, `status` or `tag`.
        """
        return params.filter(self.get_queryset()).order_by("-start_time", "-created_at")

    @route.get("/{event_id}", url_name="get_event", response=schema.EventSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        """Retrieve a single event with its creator and participant count."""
        return self.get_one(event_id)

    @route.post(
        "",
        url_name="create_event",
        response={201: schema.EventSchema, 400: ValidationErrorResponse},
        throttle=WriteThrottle(),
    )
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, models.Event]:
        """Create an event owned by the authenticated user.

        The creator's open realtime connections are subscribed to the new event's chat.
        """
        event = event_service.create_event(self.user(), payload)
        return status.HTTP_201_CREATED, self.get_queryset().get(pk=event.pk)

    @route.put(
        "/{event_id}",
        url_name="update_event",
        response={200: schema.EventSchema, 400: ValidationErrorResponse},
        permissions=[EventCreatorPermission()],
    )
    def update_event(self, event_id: UUID, payload: schema.EventEditSchema) -> models.Event:
        """Replace the editable fields of an event. Only its creator may do this."""
        event = event_service.update_event(self.get_one(event_id), payload)
        return self.get_queryset().get(pk=event.pk)

    @route.delete(
        "/{event_id}",
        url_name="delete_event",
        response={204: None},
        permissions=[EventCreatorPermission()],
    )
    def delete_event(self, event_id: UUID) -> tuple[int, None]:
        """Delete an event with its participants, photos and chat history. Only its creator may do this."""
        event_service.delete_event(self.get_one(event_id))
        return 204, None

    @route.post(
        "/{event_id}/join",
        url_name="join_event",
        response={200: schema.ParticipantSchema, 201: schema.ParticipantSchema},
    )
    def join_event(self, event_id: UUID) -> tuple[int, models.Participant]:
        """Join an event.

        Returns 201 with the new participation, or 200 with the existing one if the user had
        already joined. Returns 400 if the event is at capacity.
        """
        participant, created = ParticipationManager(self.user(), self.get_one(event_id)).join()
        return (status.HTTP_201_CREATED if created else status.HTTP_200_OK), participant

    @route.post("/{event_id}/leave", url_name="leave_event", response=ResponseMessage)
    def leave_event(self, event_id: UUID) -> ResponseMessage:
        """Leave an event. Leaving an event one has not joined succeeds without effect."""
        left = ParticipationManager(self.user(), self.get_one(event_id)).leave()
        return ResponseMessage(message="You left the event." if left else "You are not a participant.")

    @route.get("/{event_id}/participants", url_name="list_participants", response=list[schema.ParticipantSchema])
    def list_participants(self, event_id: UUID) -> QuerySet[models.Participant]:
        """List the participants of an event in join order."""
        return event_service.get_participants(self.get_one(event_id))

    @route.get("/{event_id}/photos", url_name="list_photos", response=list[schema.EventPhotoSchema])
    def list_photos(self, event_id: UUID) -> QuerySet[models.EventPhoto]:
        """List the photos of an event, newest first."""
        return event_service.get_photos(self.get_one(event_id))

    @route.post(
        "/{event_id}/photos",
        url_name="add_photo",
        response={201: schema.EventPhotoSchema},
        throttle=WriteThrottle(),
    )
    def add_photo(self, event_id: UUID, payload: schema.PhotoCreateSchema) -> tuple[int, models.EventPhoto]:
        """Share a photo of an event."""
        return status.HTTP_201_CREATED, event_service.add_photo(self.get_one(event_id), self.user(), payload)
