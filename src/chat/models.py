import typing as t

from django.conf import settings
from django.db import models

from events.models import Event


class ChatMessageQuerySet(models.QuerySet["ChatMessage"]):
    def for_event(self, event_id: t.Any) -> t.Self:
        """Messages of one event, oldest first, with their sender."""
        return self.filter(event_id=event_id).select_related("user").order_by("created_at", "id")


class ChatMessage(models.Model):
    """A chat message posted to an event's room.

    Messages are immutable once created. The database-assigned primary key is
    monotonic and breaks ties between messages sharing a timestamp.
    """

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="chat_messages")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="chat_messages")
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = ChatMessageQuerySet.as_manager()

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [models.Index(fields=["event", "created_at", "id"], name="chat_event_created_idx")]

    def __str__(self) -> str:
        return f"{self.user} in {self.event_id}: {self.message[:40]}"

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Persist a new message. Existing messages cannot be edited."""
        if not self._state.adding:
            raise ValueError("Chat messages are immutable.")
        super().save(*args, **kwargs)
