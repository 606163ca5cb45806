# src/events/admin/__init__.py
"""Events admin module.

Django autodiscover imports this module, which registers the admin classes
through the @admin.register decorators in the submodules.
"""

from events.admin.event import EventAdmin, EventPhotoAdmin, ParticipantAdmin

__all__ = [
    "EventAdmin",
    "ParticipantAdmin",
    "EventPhotoAdmin",
]
