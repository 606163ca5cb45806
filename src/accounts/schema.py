"""Schema for accounts module."""

from ninja import ModelSchema
from pydantic import UUID4

from .models import HuddleUser


class HuddleUserSchema(ModelSchema):
    id: UUID4
    display_name: str
    interests: list[str]

    class Meta:
        model = HuddleUser
        fields = [
            "username",
            "email",
            "first_name",
            "last_name",
            "profile_image_url",
            "bio",
            "team",
            "is_active",
        ]


class MinimalHuddleUserSchema(ModelSchema):
    """The sender/creator identity embedded in events, participants and chat messages."""

    id: UUID4
    display_name: str

    class Meta:
        model = HuddleUser
        fields = ["username", "first_name", "last_name", "profile_image_url"]
