import re
import typing as t
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class HuddleUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    profile_image_url = models.URLField(max_length=500, blank=True, help_text="Avatar URL")
    bio = models.TextField(blank=True)
    team = models.CharField(max_length=255, blank=True, help_text="Team or group the user belongs to")
    interests = models.JSONField(default=list, blank=True, help_text="List of free-form interest labels")

    objects = UserManager()

    class Meta:
        ordering = ["username"]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Normalize interests before saving."""
        self.interests = [str(i).strip() for i in self.interests or [] if str(i).strip()]
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's full name, or a prettified username as a fallback."""
        return self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
