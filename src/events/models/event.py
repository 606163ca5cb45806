import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Count

from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def with_creator(self) -> t.Self:
        """Select the creator as well."""
        return self.select_related("creator")

    def with_participant_count(self) -> t.Self:
        """Annotate the number of participants."""
        return self.annotate(participant_count=Count("participants", distinct=True))

    def full(self) -> t.Self:
        """Everything the API needs to render an event."""
        return self.with_creator().with_participant_count()

    def created_by(self, user_id: t.Any) -> t.Self:
        """Events created by the given user."""
        return self.filter(creator_id=user_id)

    def joined_by(self, user_id: t.Any) -> t.Self:
        """Events the given user participates in."""
        return self.filter(participants__user_id=user_id)


class EventManager(models.Manager.from_queryset(EventQuerySet)):  # type: ignore[misc]
    """Manager exposing the EventQuerySet helpers on `Event.objects`."""


class Event(TimeStampedModel):
    class EventType(models.TextChoices):
        PARTY = "party"
        HIKING = "hiking"
        FOOD = "food"
        GAMING = "gaming"
        NETWORKING = "networking"
        BEACH = "beach"
        SHOPPING = "shopping"
        OTHER = "other"

    class EventStatus(models.TextChoices):
        UPCOMING = "upcoming"
        ONGOING = "ongoing"
        COMPLETED = "completed"
        CANCELLED = "cancelled"

    creator = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="created_events")
    title = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    event_type = models.CharField(choices=EventType.choices, max_length=20, db_index=True, default=EventType.OTHER)
    status = models.CharField(choices=EventStatus.choices, max_length=20, db_index=True, default=EventStatus.UPCOMING)
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=255)
    meeting_spot = models.CharField(max_length=255, blank=True)
    max_capacity = models.PositiveIntegerField(
        null=True, blank=True, help_text="Maximum number of participants. Leave empty for no limit."
    )
    tags = models.JSONField(default=list, blank=True, help_text="List of free-form tags")
    image_url = models.URLField(max_length=500, blank=True)

    objects = EventManager()

    class Meta:
        ordering = ["-start_time", "-created_at"]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        """Validate the time window and normalize tags."""
        super().clean()
        if self.end_time and self.start_time and self.end_time < self.start_time:
            raise ValidationError({"end_time": "End time must not be before start time."})
        if not isinstance(self.tags, list):
            raise ValidationError({"tags": "Tags must be a list of strings."})
        self.tags = list(dict.fromkeys(str(tag).strip() for tag in self.tags if str(tag).strip()))
