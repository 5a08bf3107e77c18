import typing as t
from decimal import Decimal
from uuid import UUID

from ninja import Schema

from common.schema import OneToOneFiftyString


class PaymentDecisionSchema(Schema):
    status: t.Literal["approved", "rejected"]


class TicketScanSchema(Schema):
    ticket_id: OneToOneFiftyString


class RegistrationCountsSchema(Schema):
    total: int = 0
    confirmed: int = 0
    pending: int = 0
    cancelled: int = 0
    waitlisted: int = 0


class PaymentSummarySchema(Schema):
    pending_amount: Decimal = Decimal("0")
    approved_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    completed: int = 0


class AttendanceSummarySchema(Schema):
    present: int = 0
    absent: int = 0


class ParticipantTypeCountSchema(Schema):
    participant_type: str | None
    count: int


class EventSummarySchema(Schema):
    id: UUID
    name: str
    registration_limit: int
    current_registrations: int


class EventAnalyticsSchema(Schema):
    event: EventSummarySchema
    registrations: RegistrationCountsSchema
    payments: PaymentSummarySchema
    attendance: AttendanceSummarySchema
    participant_types: list[ParticipantTypeCountSchema]
    confirmed_revenue: Decimal
