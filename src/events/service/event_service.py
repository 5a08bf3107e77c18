import structlog
from django.db import transaction

from events import exceptions
from events.models import Event
from notifications.service import dispatcher

logger = structlog.get_logger(__name__)


@transaction.atomic
def publish_event(event: Event) -> Event:
    """Publish a draft event and announce it."""
    event = Event.objects.select_for_update().select_related("organizer").get(pk=event.pk)
    if event.status != Event.EventStatus.DRAFT:
        raise exceptions.InvalidStateError("Only draft events can be published.")
    event.status = Event.EventStatus.PUBLISHED
    event.save(update_fields=["status", "updated_at"])
    logger.info("event_published", event_id=str(event.pk), organizer_id=str(event.organizer_id))
    dispatcher.notify_event_published(event)
    return event
