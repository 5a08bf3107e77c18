import typing as t

from django.db.models import Q
from django.utils import timezone
from ninja import FilterSchema

from events.models import Event, Registration


class RegistrationFilterSchema(FilterSchema):
    """Organizer-side filter for an event's registrations."""

    status: Registration.Status | None = None
    payment_status: Registration.PaymentStatus | None = None
    attendance_marked: bool | None = None


class MyRegistrationsFilterSchema(FilterSchema):
    """Participant-side filter for their own registrations."""

    status: Registration.Status | None = None
    when: t.Literal["upcoming", "past", "all"] = "upcoming"

    def filter_when(self, when: str) -> Q:
        """``upcoming`` starts now or later, ``past`` has ended, anything else is unfiltered."""
        now = timezone.now()
        if when == "upcoming":
            return Q(event__event_start_date__gte=now)
        if when == "past":
            return Q(event__event_end_date__lt=now)
        return Q()


class EventFilterSchema(FilterSchema):
    """Public event listing filter."""

    event_type: Event.EventType | None = None
    eligibility: Event.Eligibility | None = None
    is_team_event: bool | None = None
    include_past: bool = False

    def filter_include_past(self, include_past: bool) -> Q:
        """Hide events whose registration deadline has passed unless asked otherwise."""
        if include_past:
            return Q()
        return Q(registration_deadline__gt=timezone.now())
