"""Join/leave semantics and capacity enforcement."""

import structlog
from django.db import IntegrityError, transaction

from accounts.models import HuddleUser
from chat import service as chat_service
from events.exceptions import CapacityExceededError
from events.models import Event, Participant

logger = structlog.get_logger(__name__)


class ParticipationManager:
    """Handles joining and leaving an event.

    The event row is locked with SELECT ... FOR UPDATE before the participant count is
    read, so concurrent joins to the same event are serialized and the capacity holds.
    """

    def __init__(self, user: HuddleUser, event: Event) -> None:
        """Initialize the ParticipationManager."""
        self.user = user
        self.event = event

    @transaction.atomic
    def join(self) -> tuple[Participant, bool]:
        """Join the event.

        Joining an event twice is a no-op that returns the existing participation, and
        never trips the capacity check.

        Returns:
            The participation and whether it was created.

        Raises:
            Event.DoesNotExist: If the event has been deleted.
            CapacityExceededError: If the event is already full.
        """
        event = Event.objects.select_for_update().get(pk=self.event.pk)
        if existing := Participant.objects.filter(event=event, user=self.user).first():
            return existing, False

        if event.max_capacity is not None and self.count() >= event.max_capacity:
            logger.info("event_join_rejected_full", event_id=str(event.pk), max_capacity=event.max_capacity)
            raise CapacityExceededError(event.pk, event.max_capacity)

        try:
            with transaction.atomic():
                participant = Participant.objects.create(event=event, user=self.user)
        except IntegrityError:
            # Lost a race against the same user's concurrent join.
            return Participant.objects.get(event=event, user=self.user), False

        user_id, event_id = self.user.pk, event.pk
        transaction.on_commit(lambda: chat_service.subscribe_user(user_id, event_id))
        logger.info("event_joined", event_id=str(event.pk), user_id=str(user_id))
        return participant, True

    @transaction.atomic
    def leave(self) -> bool:
        """Leave the event. Leaving an event one has not joined is a no-op.

        Returns:
            Whether a participation was removed.
        """
        event = Event.objects.select_for_update().get(pk=self.event.pk)
        deleted, _ = Participant.objects.filter(event=event, user=self.user).delete()
        if not deleted:
            return False

        user_id, event_id = self.user.pk, event.pk
        if event.creator_id != user_id:
            transaction.on_commit(lambda: chat_service.unsubscribe_user(user_id, event_id))
        logger.info("event_left", event_id=str(event_id), user_id=str(user_id))
        return True

    def count(self) -> int:
        """Number of participants of the event."""
        return Participant.objects.filter(event_id=self.event.pk).count()
