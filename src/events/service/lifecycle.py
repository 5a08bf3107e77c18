"""Transitions shared by the registration, team and payment paths.

Callers hold row locks on the event and the registration (in that order) and run
inside ``transaction.atomic``.
"""

import structlog
from django.db.models import Q

from accounts.models import FelicityUser
from events.models import Event, Registration, TeamMember
from events.service import capacity_ledger, ticket_issuer
from notifications.service import dispatcher

logger = structlog.get_logger(__name__)


def has_active_registration(event: Event, user: FelicityUser) -> bool:
    """Whether the user already holds a seat for the event, as leader or as team member."""
    return (
        Registration.objects.active().filter(event=event, participant=user).exists()
        or TeamMember.objects.filter(
            Q(event=event, user=user, status=TeamMember.Status.ACCEPTED)
            & ~Q(registration__status=Registration.Status.CANCELLED)
        ).exists()
    )


def lock(registration: Registration) -> tuple[Event, Registration]:
    """Lock the event row, then the registration row, and return fresh copies."""
    event = Event.objects.select_for_update().get(pk=registration.event_id)
    locked = Registration.objects.select_for_update().select_related("participant").get(pk=registration.pk)
    locked.event = event
    return event, locked


def refresh_confirmation(registration: Registration) -> bool:
    """Confirm a pending registration once its team is complete and its payment settled.

    Safe to call any number of times from any path. Returns True only when this
    call performed the transition. An already confirmed registration gets a
    missing ticket repaired but is not notified again.
    """
    if registration.status == Registration.Status.CONFIRMED:
        if ticket_issuer.needs_ticket(registration):
            ticket_issuer.issue_ticket(registration)
        return False
    if registration.status != Registration.Status.PENDING:
        return False
    if not (registration.is_team_complete and registration.is_payment_settled):
        logger.debug(
            "registration_still_pending",
            registration_id=str(registration.pk),
            team_complete=registration.is_team_complete,
            payment_settled=registration.is_payment_settled,
        )
        return False

    registration.status = Registration.Status.CONFIRMED
    registration.save(update_fields=["status", "updated_at"])
    ticket_issuer.issue_ticket(registration)
    logger.info("registration_confirmed", registration_id=str(registration.pk), event_id=str(registration.event_id))
    dispatcher.notify_registration_confirmed(registration)
    return True


def cancel(registration: Registration) -> Registration:
    """Cancel a registration and give its slot back.

    The slot is released only on the first cancellation. Team memberships are
    voided with it. Stock taken by an approved merchandise payment stays taken.
    """
    if registration.status == Registration.Status.CANCELLED:
        return registration
    registration.status = Registration.Status.CANCELLED
    registration.save(update_fields=["status", "updated_at"])
    registration.team_members.filter(status=TeamMember.Status.ACCEPTED).update(status=TeamMember.Status.CANCELLED)
    capacity_ledger.decrement_registrations(registration.event)
    logger.info("registration_cancelled", registration_id=str(registration.pk), event_id=str(registration.event_id))
    return registration
