# src/events/admin/base.py
"""Base admin components: link mixins and inlines."""

import typing as t

from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import TabularInline

from events import models


class ParticipantLinkMixin:
    """Mixin to add a link to the registering participant."""

    def participant_link(self, obj: t.Any) -> str:
        user = getattr(obj, "participant", None) or getattr(obj, "user", None)
        url = reverse("admin:accounts_felicityuser_change", args=[user.id])  # type: ignore[union-attr]
        return format_html('<a href="{}">{}</a>', url, user.username)  # type: ignore[union-attr]

    participant_link.short_description = "Participant"  # type: ignore[attr-defined]


class EventLinkMixin:
    """Mixin to add a link to an event."""

    def event_link(self, obj: t.Any) -> str | None:
        if not hasattr(obj, "event") or not obj.event:
            return None
        url = reverse("admin:events_event_change", args=[obj.event.id])
        return format_html('<a href="{}">{}</a>', url, obj.event.name)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


class MerchandiseItemInline(TabularInline):  # type: ignore[misc]
    model = models.MerchandiseItem
    extra = 1
    fields = ["name", "price", "stock_quantity", "max_per_participant"]


class TeamMemberInline(TabularInline):  # type: ignore[misc]
    model = models.TeamMember
    extra = 0
    autocomplete_fields = ["user"]
    fields = ["user", "name", "email", "status"]
    readonly_fields = ["name", "email"]


class MerchandiseOrderLineInline(TabularInline):  # type: ignore[misc]
    model = models.MerchandiseOrderLine
    extra = 0
    fields = ["item", "name", "variant", "quantity", "price"]
    readonly_fields = ["item", "name", "variant", "quantity", "price"]
    can_delete = False
