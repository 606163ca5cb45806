from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route, status

from chat import schema, service
from chat.models import ChatMessage
from common.authentication import HuddleJWTAuth
from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from events.models import Event


@api_controller("/events", auth=HuddleJWTAuth(), tags=["Chat"])
class ChatController(UserAwareController):
    def get_event(self, event_id: UUID) -> Event:
        return self.get_object_or_exception(Event, pk=event_id)  # type: ignore[no-any-return]

    @route.get("/{event_id}/messages", url_name="list_messages", response=list[schema.ChatMessageSchema])
    def list_messages(self, event_id: UUID, after: int | None = None) -> QuerySet[ChatMessage]:
        """List an event's chat history, oldest first.

        Clients poll this as a backstop for the realtime connection. Pass `after` with the id
        of the last message already seen to fetch only newer ones.
        """
        return service.list_messages(self.get_event(event_id), after=after)

    @route.post(
        "/{event_id}/messages",
        url_name="post_message",
        response={201: schema.ChatMessageSchema},
        throttle=WriteThrottle(),
    )
    def post_message(self, event_id: UUID, payload: schema.MessageCreateSchema) -> tuple[int, ChatMessage]:
        """Post a chat message as the authenticated user.

        The message is persisted and broadcast to the event's room exactly like one sent over
        the realtime connection.
        """
        message = service.post_message(self.get_event(event_id), self.user(), payload.message)
        return status.HTTP_201_CREATED, message
