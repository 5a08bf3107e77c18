"""Events schema package."""

from .event import (
    CustomFormFieldSchema,
    EventSchema,
    MerchandiseItemSchema,
    MinimalEventSchema,
    OrganizerSchema,
)
from .organizer import (
    AttendanceSummarySchema,
    EventAnalyticsSchema,
    EventSummarySchema,
    ParticipantTypeCountSchema,
    PaymentDecisionSchema,
    PaymentSummarySchema,
    RegistrationCountsSchema,
    TicketScanSchema,
)
from .registration import (
    JoinTeamSchema,
    MerchandiseOrderLineSchema,
    MerchandiseSelectionSchema,
    RegistrationCreateSchema,
    RegistrationInListSchema,
    RegistrationSchema,
    TeamMemberSchema,
)

__all__ = [
    "AttendanceSummarySchema",
    "CustomFormFieldSchema",
    "EventAnalyticsSchema",
    "EventSchema",
    "EventSummarySchema",
    "JoinTeamSchema",
    "MerchandiseItemSchema",
    "MerchandiseOrderLineSchema",
    "MerchandiseSelectionSchema",
    "MinimalEventSchema",
    "OrganizerSchema",
    "ParticipantTypeCountSchema",
    "PaymentDecisionSchema",
    "PaymentSummarySchema",
    "RegistrationCountsSchema",
    "RegistrationCreateSchema",
    "RegistrationInListSchema",
    "RegistrationSchema",
    "TeamMemberSchema",
    "TicketScanSchema",
]
