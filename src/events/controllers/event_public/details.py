from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.throttling import AnonDefaultThrottle
from events import filters, models, schema

from .base import EventPublicBaseController


@api_controller("/events", tags=["Events"], throttle=AnonDefaultThrottle())
class EventPublicDetailsController(EventPublicBaseController):
    """Browse published events."""

    @route.get("/", url_name="list_events", response=PaginatedResponseSchema[schema.EventSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(Searching, search_fields=["name", "description", "organizer__organizer_name"])
    def list_events(
        self,
        params: filters.EventFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Event]:
        """List published events, soonest first.

        Events past their registration deadline are hidden unless `include_past` is set.
        """
        return params.filter(self.get_queryset()).distinct()

    @route.get("/{uuid:event_id}", url_name="get_event", response=schema.EventSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        """Retrieve a published event with its custom form fields and merchandise items."""
        return self.get_one(event_id)
