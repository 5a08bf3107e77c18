from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse
from common.throttling import RegistrationThrottle
from events import models, schema
from events.controllers.permissions import IsParticipant
from events.service import registration_service

from .base import EventPublicBaseController


@api_controller(
    "/events",
    auth=JWTAuth(),
    permissions=[IsParticipant()],
    tags=["Registrations"],
    throttle=RegistrationThrottle(),
)
class EventPublicRegistrationController(EventPublicBaseController):
    @route.post(
        "/{uuid:event_id}/register",
        url_name="register_for_event",
        response={201: schema.RegistrationSchema, 400: ErrorResponse, 403: ErrorResponse, 409: ErrorResponse},
    )
    def register(self, event_id: UUID, payload: schema.RegistrationCreateSchema) -> tuple[int, models.Registration]:
        """Register for an event.

        Free individual registrations come back confirmed with a ticket. Team registrations
        return an invite code to share and stay pending until the team reaches its target size.
        Merchandise and paid registrations stay pending until the organizer approves the payment.
        """
        registration = registration_service.register_for_event(self.user(), event_id, payload)
        return 201, models.Registration.objects.full().get(pk=registration.pk)
