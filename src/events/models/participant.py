from django.conf import settings
from django.db import models

from .event import Event


class Participant(models.Model):
    """A user's participation in an event. At most one per (event, user) pair."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="participations")
    joined_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        constraints = [models.UniqueConstraint(fields=["event", "user"], name="unique_event_participant")]
        ordering = ["joined_at", "id"]

    def __str__(self) -> str:
        return f"{self.user} @ {self.event}"
