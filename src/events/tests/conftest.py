from datetime import datetime

import pytest

from accounts.models import HuddleUser
from events.models import Event


@pytest.fixture
def event(user: HuddleUser, next_week: datetime) -> Event:
    return Event.objects.create(
        creator=user,
        title="Sunset Hike",
        description="Easy trail with a view over the bay",
        event_type=Event.EventType.HIKING,
        start_time=next_week,
        location="Discovery Park",
        meeting_spot="North parking lot",
        tags=["outdoors", "sunset"],
    )


@pytest.fixture
def small_event(user: HuddleUser, next_week: datetime) -> Event:
    """An event with room for two participants."""
    return Event.objects.create(
        creator=user,
        title="Mixer",
        event_type=Event.EventType.NETWORKING,
        start_time=next_week,
        location="Capitol Hill",
        max_capacity=2,
    )
