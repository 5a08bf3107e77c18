# src/events/admin/event.py
"""Admin classes for Event and MerchandiseItem."""

from django.contrib import admin
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import EventLinkMixin, MerchandiseItemInline


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = [
        "name",
        "organizer",
        "event_type",
        "status",
        "eligibility",
        "event_start_date",
        "registration_deadline",
        "current_registrations",
        "registration_limit",
    ]
    list_filter = ["status", "event_type", "eligibility", "is_team_event"]
    search_fields = ["name", "description", "organizer__organizer_name", "organizer__email"]
    autocomplete_fields = ["organizer"]
    readonly_fields = ["current_registrations", "created_at", "updated_at"]
    date_hierarchy = "event_start_date"
    inlines = [MerchandiseItemInline]


@admin.register(models.MerchandiseItem)
class MerchandiseItemAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["name", "event_link", "price", "stock_quantity", "max_per_participant"]
    list_filter = ["event"]
    search_fields = ["name", "event__name"]
    autocomplete_fields = ["event"]
