from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.controllers.permissions import EventOwnerPermission, IsOrganizer
from events.service import payment_service, registration_service

from .base import EventAdminBaseController


@api_controller(
    "/organizer/events/{event_id}",
    auth=JWTAuth(),
    permissions=[IsOrganizer(), EventOwnerPermission()],
    tags=["Organizer"],
    throttle=WriteThrottle(),
)
class EventAdminRegistrationsController(EventAdminBaseController):
    """Registrations, payments and check-in for an organizer's event."""

    @route.get(
        "/registrations",
        url_name="list_registrations",
        response=PaginatedResponseSchema[schema.RegistrationInListSchema],
        throttle=UserDefaultThrottle(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(
        Searching,
        search_fields=["participant__first_name", "participant__last_name", "participant__email", "ticket_id"],
    )
    def list_registrations(
        self,
        event_id: UUID,
        params: filters.RegistrationFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Registration]:
        """List the event's registrations, newest first.

        Filter by status, payment status or attendance; search by participant name, email or ticket id.
        """
        event = self.get_one(event_id)
        qs = models.Registration.objects.with_team_size().filter(event=event).select_related("participant")
        return params.filter(qs.prefetch_related("team_members")).order_by("-created_at").distinct()

    @route.get(
        "/registrations/{uuid:registration_id}",
        url_name="get_registration",
        response={200: schema.RegistrationSchema},
        throttle=UserDefaultThrottle(),
    )
    def get_registration_detail(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Full details of one registration, including form responses and payment proof."""
        event = self.get_one(event_id)
        return models.Registration.objects.full().get(pk=self.get_registration(event, registration_id).pk)

    @route.post(
        "/registrations/{uuid:registration_id}/payment",
        url_name="decide_payment",
        response={200: schema.RegistrationSchema, 409: ErrorResponse},
    )
    def decide_payment(
        self, event_id: UUID, registration_id: UUID, payload: schema.PaymentDecisionSchema
    ) -> models.Registration:
        """Approve or reject a pending payment.

        Approval takes purchased merchandise out of stock and confirms the registration once its
        team is complete. Rejection cancels the registration and frees its seat.
        """
        event = self.get_one(event_id)
        registration = self.get_registration(event, registration_id)
        if payload.status == "approved":
            payment_service.approve_payment(registration)
        else:
            payment_service.reject_payment(registration)
        return models.Registration.objects.full().get(pk=registration.pk)

    @route.post(
        "/registrations/{uuid:registration_id}/attendance",
        url_name="mark_attendance",
        response={200: schema.RegistrationSchema, 409: ErrorResponse},
    )
    def mark_attendance(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Check a confirmed registration in."""
        event = self.get_one(event_id)
        registration = self.get_registration(event, registration_id)
        registration = registration_service.mark_attendance(registration, self.user())
        return models.Registration.objects.full().get(pk=registration.pk)

    @route.post(
        "/attendance/scan",
        url_name="scan_ticket",
        response={200: schema.RegistrationSchema, 404: ErrorResponse, 409: ErrorResponse},
    )
    def scan_ticket(self, event_id: UUID, payload: schema.TicketScanSchema) -> models.Registration:
        """Check a registration in from a scanned ticket id."""
        event = self.get_one(event_id)
        registration = registration_service.mark_attendance_by_ticket(event, payload.ticket_id, self.user())
        return models.Registration.objects.full().get(pk=registration.pk)
