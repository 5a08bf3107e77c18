import typing as t
from uuid import UUID

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404

from common.controllers import UserAwareController
from events import models


class EventAdminBaseController(UserAwareController):
    """Base controller for organizer endpoints.

    Provides common methods for retrieving event querysets and instances.
    Subclasses should be decorated with @api_controller to register routes.
    """

    def get_queryset(self) -> QuerySet[models.Event]:
        """Events visible to organizers; ownership is checked by the object permission."""
        return models.Event.objects.with_organizer()

    def get_one(self, event_id: UUID) -> models.Event:
        """Wrapper helper."""
        return t.cast(models.Event, self.get_object_or_exception(self.get_queryset(), pk=event_id))

    def get_registration(self, event: models.Event, registration_id: UUID) -> models.Registration:
        """A registration of ``event``, 404 otherwise."""
        return get_object_or_404(
            models.Registration.objects.select_related("event", "participant"), pk=registration_id, event=event
        )
