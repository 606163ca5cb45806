from django.db.models import QuerySet
from ninja_extra import api_controller, route

from common.authentication import HuddleJWTAuth
from common.controllers import UserAwareController
from events import models, schema
from events.service import event_service


@api_controller("/users/me", auth=HuddleJWTAuth(), tags=["Me"])
class MeController(UserAwareController):
    @route.get("/events", url_name="my_events", response=list[schema.EventSchema])
    def my_events(self) -> QuerySet[models.Event]:
        """Events created by the authenticated user, newest start first."""
        return event_service.get_user_events(self.user())

    @route.get("/participations", url_name="my_participations", response=list[schema.ParticipationSchema])
    def my_participations(self) -> QuerySet[models.Participant]:
        """Events the authenticated user joined, newest start first."""
        return event_service.get_user_participations(self.user())

    @route.get("/photos", url_name="my_photos", response=list[schema.UserPhotoSchema])
    def my_photos(self) -> QuerySet[models.EventPhoto]:
        """Photos the authenticated user shared, newest first."""
        return event_service.get_user_photos(self.user())
