"""Hands lifecycle events over to the notification tasks.

Everything is enqueued after the surrounding transaction commits. Failures are
logged and dropped so a notification can never block or undo a transition.
"""

import typing as t

import structlog
from django.db import transaction

if t.TYPE_CHECKING:
    from events.models import Event, Registration

logger = structlog.get_logger(__name__)


def _enqueue(name: str, send: t.Callable[[], t.Any], **context: t.Any) -> None:
    def _run() -> None:
        try:
            send()
        except Exception:
            logger.exception("notification_enqueue_failed", notification=name, **context)

    transaction.on_commit(_run)


def notify_registration_confirmed(registration: "Registration") -> None:
    """Send the ticket to the leader and every team member, or the order confirmation for merchandise."""
    from notifications import tasks

    registration_id = str(registration.pk)
    if registration.event.is_merchandise:
        _enqueue(
            "merchandise_confirmation",
            lambda: tasks.send_merchandise_confirmation.delay(registration_id=registration_id),
            registration_id=registration_id,
        )
        return

    for name, email in registration.recipients():
        if not email:
            logger.warning("ticket_recipient_without_email", registration_id=registration_id)
            continue
        _enqueue(
            "ticket_email",
            lambda name=name, email=email: tasks.send_ticket_email.delay(  # type: ignore[misc]
                registration_id=registration_id, recipient_name=name, recipient_email=email
            ),
            registration_id=registration_id,
        )


def notify_event_published(event: "Event") -> None:
    """Announce a freshly published event on Discord."""
    from notifications import tasks

    event_id = str(event.pk)
    _enqueue(
        "discord_event_published",
        lambda: tasks.notify_discord_event_published.delay(event_id=event_id),
        event_id=event_id,
    )
