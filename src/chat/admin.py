"""Django admin for chat messages."""

from django.contrib import admin
from django.http import HttpRequest
from unfold.admin import ModelAdmin

from chat.models import ChatMessage
from events.admin.base import EventLinkMixin, UserLinkMixin


@admin.register(ChatMessage)
class ChatMessageAdmin(ModelAdmin, UserLinkMixin, EventLinkMixin):  # type: ignore[misc]
    """Messages are immutable, so the admin can browse and delete them but not edit them."""

    list_display = ["id", "user_link", "event_link", "message_short", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["message", "user__username", "event__title"]
    list_select_related = ["user", "event"]
    readonly_fields = ["event", "user", "message", "created_at"]
    date_hierarchy = "created_at"

    @admin.display(description="Message")
    def message_short(self, obj: ChatMessage) -> str:
        return obj.message[:60] + "…" if len(obj.message) > 60 else obj.message

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj: ChatMessage | None = None) -> bool:
        return False
