from uuid import UUID

from django.db.models import QuerySet
from django.http import HttpResponse
from django.utils.text import slugify
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.controllers.permissions import EventOwnerPermission, IsOrganizer
from events.service import analytics_service, event_service

from .base import EventAdminBaseController


@api_controller(
    "/organizer/events",
    auth=JWTAuth(),
    permissions=[IsOrganizer(), EventOwnerPermission()],
    tags=["Organizer"],
    throttle=WriteThrottle(),
)
class EventAdminCoreController(EventAdminBaseController):
    """Publishing, statistics and exports for an organizer's own events."""

    @route.get(
        "/",
        url_name="list_my_events",
        response=PaginatedResponseSchema[schema.EventSchema],
        throttle=UserDefaultThrottle(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_my_events(self) -> QuerySet[models.Event]:
        """List the events you organize, drafts included."""
        return models.Event.objects.owned_by(self.user()).with_organizer().prefetch_related("merchandise_items")

    @route.post(
        "/{uuid:event_id}/publish",
        url_name="publish_event",
        response={200: schema.EventSchema, 409: ErrorResponse},
    )
    def publish_event(self, event_id: UUID) -> models.Event:
        """Publish a draft event so participants can register. The event is also announced on Discord."""
        event = self.get_one(event_id)
        event_service.publish_event(event)
        return self.get_queryset().prefetch_related("merchandise_items").get(pk=event.pk)

    @route.get(
        "/{uuid:event_id}/analytics",
        url_name="event_analytics",
        response=schema.EventAnalyticsSchema,
        throttle=UserDefaultThrottle(),
    )
    def get_analytics(self, event_id: UUID) -> schema.EventAnalyticsSchema:
        """Registration, payment and attendance statistics for the event."""
        return analytics_service.get_event_analytics(self.get_one(event_id))

    @route.get(
        "/{uuid:event_id}/export",
        url_name="export_registrations",
        response={200: None},
        throttle=UserDefaultThrottle(),
    )
    def export_registrations(self, event_id: UUID) -> HttpResponse:
        """Download every registration of the event as CSV."""
        event = self.get_one(event_id)
        response = HttpResponse(analytics_service.export_registrations_csv(event), content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{slugify(event.name)}_registrations.csv"'
        return response
