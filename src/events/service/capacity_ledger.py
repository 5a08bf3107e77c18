"""Registration counter of an event versus its limit.

Writes are single conditional UPDATE statements so concurrent registrations can
never push ``current_registrations`` past ``registration_limit``.
"""

import structlog
from django.db.models import F

from events.exceptions import CapacityExhaustedError
from events.models import Event

logger = structlog.get_logger(__name__)


def has_available_slots(event: Event, requested: int = 1) -> bool:
    """Check against the latest stored counter."""
    event.refresh_from_db(fields=["current_registrations", "registration_limit"])
    return event.has_available_slots(requested)


def is_registration_open(event: Event) -> bool:
    """Published, before the deadline and not full."""
    event.refresh_from_db(fields=["status", "registration_deadline", "current_registrations", "registration_limit"])
    return event.is_registration_open()


def increment_registrations(event: Event, count: int = 1) -> None:
    """Claim ``count`` slots or raise ``CapacityExhaustedError``.

    Must run inside the caller's transaction so the claim is rolled back with it.
    """
    updated = Event.objects.filter(
        pk=event.pk,
        current_registrations__lte=F("registration_limit") - count,
    ).update(current_registrations=F("current_registrations") + count)
    if not updated:
        logger.info("capacity_exhausted", event_id=str(event.pk), requested=count)
        raise CapacityExhaustedError()
    event.refresh_from_db(fields=["current_registrations"])


def decrement_registrations(event: Event, count: int = 1) -> None:
    """Release ``count`` slots, never going below zero."""
    updated = Event.objects.filter(pk=event.pk, current_registrations__gte=count).update(
        current_registrations=F("current_registrations") - count
    )
    if not updated:
        Event.objects.filter(pk=event.pk).update(current_registrations=0)
        logger.warning("capacity_counter_clamped", event_id=str(event.pk), requested=count)
    event.refresh_from_db(fields=["current_registrations"])
