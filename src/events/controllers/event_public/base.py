import typing as t
from uuid import UUID

from common.controllers import UserAwareController
from events import models


class EventPublicBaseController(UserAwareController):
    """Base controller for participant-facing event endpoints.

    Only published events are visible here.
    """

    def get_queryset(self) -> models.event.EventQuerySet:
        """Published events with what the detail schema needs."""
        return models.Event.objects.published().with_organizer().prefetch_related("merchandise_items")

    def get_one(self, event_id: UUID) -> models.Event:
        """Wrapper helper."""
        return t.cast(models.Event, self.get_object_or_exception(self.get_queryset(), pk=event_id))
