# src/events/admin/registration.py
"""Admin classes for Registration and TeamMember.

Counters and stock are owned by the registration services, so the seat and
ticket fields are read-only here.
"""

from django.contrib import admin
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import EventLinkMixin, MerchandiseOrderLineInline, ParticipantLinkMixin, TeamMemberInline


@admin.register(models.Registration)
class RegistrationAdmin(ModelAdmin, ParticipantLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = [
        "id",
        "event_link",
        "participant_link",
        "status",
        "payment_status",
        "ticket_id",
        "attendance_marked",
        "created_at",
    ]
    list_filter = ["status", "payment_status", "attendance_marked", "is_team_registration"]
    search_fields = ["ticket_id", "invite_code", "team_name", "event__name", "participant__email"]
    autocomplete_fields = ["event", "participant"]
    readonly_fields = [
        "id",
        "ticket_id",
        "qr_code",
        "invite_code",
        "merchandise_total",
        "payment_amount",
        "paid_at",
        "attendance_marked_at",
        "attendance_marked_by",
        "created_at",
    ]
    date_hierarchy = "created_at"
    inlines = [TeamMemberInline, MerchandiseOrderLineInline]


@admin.register(models.TeamMember)
class TeamMemberAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["name", "email", "event_link", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["name", "email", "registration__team_name", "event__name"]
    autocomplete_fields = ["registration", "event", "user"]
