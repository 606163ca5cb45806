# src/events/admin/base.py
"""Base admin components: link mixins and inlines."""

import typing as t

from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import TabularInline

from events import models


# --- Helper Mixins for Reusable Link Fields ---
class UserLinkMixin:
    """Mixin to add a link to a user."""

    def user_link(self, obj: t.Any) -> str:
        user = getattr(obj, "user", getattr(obj, "creator", None))
        url = reverse("admin:accounts_huddleuser_change", args=[user.id])  # type: ignore[union-attr]
        return format_html('<a href="{}">{}</a>', url, user.username)  # type: ignore[union-attr]

    user_link.short_description = "User"  # type: ignore[attr-defined]


class EventLinkMixin:
    """Mixin to add a link to an event."""

    def event_link(self, obj: t.Any) -> str | None:
        if not hasattr(obj, "event") or not obj.event:
            return None
        url = reverse("admin:events_event_change", args=[obj.event.id])
        return format_html('<a href="{}">{}</a>', url, obj.event.title)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


# --- Inlines ---
class ParticipantInline(TabularInline):  # type: ignore[misc]
    model = models.Participant
    extra = 0
    autocomplete_fields = ["user"]
    readonly_fields = ["joined_at"]


class EventPhotoInline(TabularInline):  # type: ignore[misc]
    model = models.EventPhoto
    extra = 0
    autocomplete_fields = ["user"]
    fields = ["user", "photo_url", "caption", "created_at"]
    readonly_fields = ["created_at"]
