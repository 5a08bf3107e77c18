"""Celery tasks delivering registration notifications.

Delivery is best effort: failures are logged and the task returns False, nothing
is retried.
"""

import httpx
import structlog
from celery import shared_task
from django.conf import settings

from events.models import Event, Registration
from notifications.service import emails

logger = structlog.get_logger(__name__)


@shared_task
def send_ticket_email(*, registration_id: str, recipient_name: str, recipient_email: str) -> bool:
    """Email the ticket of a confirmed registration to one recipient."""
    try:
        registration = Registration.objects.select_related("event", "event__organizer", "participant").get(
            pk=registration_id
        )
        emails.build_ticket_email(registration, recipient_name, recipient_email).send(fail_silently=False)
    except Exception as e:
        logger.error("ticket_email_failed", registration_id=registration_id, error=str(e))
        return False
    logger.info("ticket_email_sent", registration_id=registration_id)
    return True


@shared_task
def send_merchandise_confirmation(*, registration_id: str) -> bool:
    """Email the order confirmation of an approved merchandise registration."""
    try:
        registration = Registration.objects.select_related("event", "event__organizer", "participant").get(
            pk=registration_id
        )
        emails.build_merchandise_confirmation(registration).send(fail_silently=False)
    except Exception as e:
        logger.error("merchandise_confirmation_failed", registration_id=registration_id, error=str(e))
        return False
    logger.info("merchandise_confirmation_sent", registration_id=registration_id)
    return True


@shared_task
def notify_discord_event_published(*, event_id: str) -> bool:
    """Post the published event to the configured Discord webhook."""
    if not settings.DISCORD_WEBHOOK_URL:
        logger.info("discord_webhook_not_configured", event_id=event_id)
        return False
    try:
        event = Event.objects.select_related("organizer").get(pk=event_id)
        response = httpx.post(
            settings.DISCORD_WEBHOOK_URL,
            json=emails.build_discord_embed(event),
            timeout=settings.DISCORD_WEBHOOK_TIMEOUT,
        )
        response.raise_for_status()
    except (Event.DoesNotExist, httpx.HTTPError) as e:
        logger.error("discord_notification_failed", event_id=event_id, error=str(e))
        return False
    logger.info("discord_notification_sent", event_id=event_id)
    return True
