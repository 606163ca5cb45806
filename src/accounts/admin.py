"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin

from accounts.models import HuddleUser


@admin.register(HuddleUser)
class HuddleUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    """Admin for HuddleUser with profile fields and participation counts."""

    list_display = [
        "username",
        "email",
        "display_name_display",
        "team",
        "is_staff",
        "is_active",
        "date_joined",
        "created_event_count",
        "joined_event_count",
    ]
    list_filter = ["is_staff", "is_superuser", "is_active", "date_joined", "last_login"]
    search_fields = ["username", "first_name", "last_name", "email", "team"]
    ordering = ["-date_joined"]
    date_hierarchy = "date_joined"

    readonly_fields = ["id", "date_joined", "last_login", "display_name_display"]

    fieldsets = (
        (
            "Personal Information",
            {
                "fields": (
                    "id",
                    ("username", "email"),
                    ("first_name", "last_name"),
                    "display_name_display",
                )
            },
        ),
        (
            "Profile",
            {"fields": ("profile_image_url", "bio", "team", "interests")},
        ),
        (
            "Authentication",
            {"fields": ("password", ("date_joined", "last_login"))},
        ),
        (
            "Permissions",
            {
                "fields": (
                    ("is_active", "is_staff", "is_superuser"),
                    "groups",
                    "user_permissions",
                ),
                "classes": ["collapse"],
            },
        ),
    )

    @admin.display(description="Display Name", ordering="first_name")
    def display_name_display(self, obj: HuddleUser) -> str:
        return obj.get_display_name()

    @admin.display(description="Created")
    def created_event_count(self, obj: HuddleUser) -> int:
        return obj.created_events.count()

    @admin.display(description="Joined")
    def joined_event_count(self, obj: HuddleUser) -> int:
        return obj.participations.count()
