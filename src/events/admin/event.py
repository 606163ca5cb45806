# src/events/admin/event.py
"""Admin classes for Event and related models."""

from django.contrib import admin
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import EventLinkMixin, EventPhotoInline, ParticipantInline, UserLinkMixin


@admin.register(models.Event)
class EventAdmin(ModelAdmin, UserLinkMixin):  # type: ignore[misc]
    """Admin model for Events."""

    list_display = [
        "title",
        "user_link",
        "event_type",
        "status",
        "start_time",
        "location",
        "participant_count",
    ]
    list_filter = ["event_type", "status", "start_time"]
    search_fields = ["title", "description", "location", "creator__username"]
    autocomplete_fields = ["creator"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "start_time"

    tabs = [
        ("Details", ["Details"]),
        ("Configuration", ["Configuration"]),
    ]

    fieldsets = [
        (
            "Details",
            {
                "fields": (
                    "creator",
                    "title",
                    "description",
                    ("location", "meeting_spot"),
                    "image_url",
                    "tags",
                )
            },
        ),
        (
            "Configuration",
            {
                "fields": (
                    ("event_type", "status"),
                    ("start_time", "end_time"),
                    "max_capacity",
                    ("created_at", "updated_at"),
                )
            },
        ),
    ]

    inlines = [ParticipantInline, EventPhotoInline]

    @admin.display(description="Participants")
    def participant_count(self, obj: models.Event) -> str:
        count = obj.participants.count()
        limit = obj.max_capacity if obj.max_capacity is not None else "∞"
        return f"{count} / {limit}"


@admin.register(models.Participant)
class ParticipantAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["__str__", "user_link", "event_link", "joined_at"]
    list_filter = ["joined_at"]
    search_fields = ["user__username", "event__title"]
    autocomplete_fields = ["user", "event"]
    readonly_fields = ["joined_at"]
    date_hierarchy = "joined_at"


@admin.register(models.EventPhoto)
class EventPhotoAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    """Admin for photos shared on events."""

    list_display = ["__str__", "user_link", "event_link", "caption", "created_at"]
    search_fields = ["user__username", "event__title", "caption"]
    autocomplete_fields = ["user", "event"]
    readonly_fields = ["created_at"]
    date_hierarchy = "created_at"
