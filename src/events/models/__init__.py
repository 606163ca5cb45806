from .event import Event, EventQuerySet
from .participant import Participant
from .photo import EventPhoto

__all__ = [
    "Event",
    "EventPhoto",
    "EventQuerySet",
    "Participant",
]
