import typing as t

from ninja_extra import ControllerBase

from accounts.models import HuddleUser


class UserAwareController(ControllerBase):
    def user(self) -> HuddleUser:
        """Get the user for this request."""
        return t.cast(HuddleUser, self.context.request.user)  # type: ignore[union-attr]
