# src/events/filters.py

from django.db.models import Q
from ninja import FilterSchema

from events.models import Event


class EventFilterSchema(FilterSchema):
    event_type: Event.EventType | None = None
    status: Event.EventStatus | None = None
    tag: str | None = None

    def filter_tag(self, tag: str | None) -> Q:
        """Match events carrying the given tag, case-insensitively.

        Tags are stored as a JSON list, so the quoted value is matched inside its text form.
        """
        if not tag or not tag.strip():
            return Q()
        return Q(tags__icontains=f'"{tag.strip()}"')
