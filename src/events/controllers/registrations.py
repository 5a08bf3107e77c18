from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.schema import ErrorResponse
from common.throttling import RegistrationThrottle, UserDefaultThrottle
from events import filters, models, schema
from events.controllers.permissions import IsParticipant
from events.service import registration_service, team_service


@api_controller("/registrations", auth=JWTAuth(), tags=["Registrations"], throttle=UserDefaultThrottle())
class RegistrationController(UserAwareController):
    """A participant's own registrations, teams and tickets."""

    @route.get(
        "/mine",
        url_name="my_registrations",
        response=PaginatedResponseSchema[schema.RegistrationSchema],
        permissions=[IsParticipant()],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def my_registrations(
        self,
        params: filters.MyRegistrationsFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Registration]:
        """List registrations you lead or have joined as a team member.

        Defaults to upcoming events. Use `when=past` or `when=all` to widen the window.
        """
        return registration_service.my_registrations(self.user(), params)

    @route.post(
        "/join-team",
        url_name="join_team",
        response={200: schema.RegistrationSchema, 403: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
        permissions=[IsParticipant()],
        throttle=RegistrationThrottle(),
    )
    def join_team(self, payload: schema.JoinTeamSchema) -> models.Registration:
        """Join a team with the invite code shared by its leader.

        The team registration is confirmed once the last member joins and any required payment is approved.
        """
        registration = team_service.join_team(payload.invite_code, self.user())
        return models.Registration.objects.full().get(pk=registration.pk)

    @route.post(
        "/{uuid:registration_id}/cancel",
        url_name="cancel_registration",
        response={200: schema.RegistrationSchema, 403: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
        permissions=[IsParticipant()],
    )
    def cancel_registration(self, registration_id: UUID) -> models.Registration:
        """Cancel your registration before the event starts. The seat goes back to the event."""
        registration = registration_service.cancel_registration(registration_id, self.user())
        return models.Registration.objects.full().get(pk=registration.pk)

    @route.get(
        "/ticket/{ticket_id}",
        url_name="get_registration_by_ticket",
        response={200: schema.RegistrationSchema, 403: ErrorResponse, 404: ErrorResponse},
    )
    def get_by_ticket(self, ticket_id: str) -> models.Registration:
        """Look up a registration by its ticket id. Visible to its holders and the event's organizer."""
        return registration_service.get_registration_by_ticket(ticket_id, self.user())
