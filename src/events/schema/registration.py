import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import UUID4, Field

from accounts.schema import MinimalUserSchema
from common.schema import OneToOneFiftyString, StrippedString
from events.models import MerchandiseOrderLine, Registration, TeamMember

from .event import MinimalEventSchema


class MerchandiseSelectionSchema(Schema):
    item_id: UUID4
    quantity: int = Field(1, ge=1)
    variant: StrippedString = ""


class RegistrationCreateSchema(Schema):
    form_responses: dict[str, t.Any] = Field(default_factory=dict)
    is_team_registration: bool = False
    team_name: StrippedString | None = None
    target_team_size: int | None = Field(None, ge=1)
    merchandise: list[MerchandiseSelectionSchema] = Field(default_factory=list)
    payment_proof: StrippedString | None = Field(
        None, description="Reference to an uploaded payment proof returned by the file storage."
    )
    transaction_id: StrippedString | None = None


class JoinTeamSchema(Schema):
    invite_code: OneToOneFiftyString


class TeamMemberSchema(ModelSchema):
    user_id: UUID

    class Meta:
        model = TeamMember
        fields = ["name", "email", "status", "created_at"]


class MerchandiseOrderLineSchema(ModelSchema):
    item_id: UUID
    price: Decimal
    line_total: Decimal

    class Meta:
        model = MerchandiseOrderLine
        fields = ["name", "variant", "quantity"]


class RegistrationSchema(ModelSchema):
    id: UUID
    event: MinimalEventSchema
    participant: MinimalUserSchema
    team_size: int
    team_members: list[TeamMemberSchema]
    merchandise_lines: list[MerchandiseOrderLineSchema]
    payment_amount: Decimal
    merchandise_total: Decimal
    registered_at: datetime

    class Meta:
        model = Registration
        fields = [
            "status",
            "form_responses",
            "is_team_registration",
            "team_name",
            "target_team_size",
            "invite_code",
            "payment_required",
            "payment_status",
            "payment_proof",
            "transaction_id",
            "paid_at",
            "ticket_id",
            "qr_code",
            "attendance_marked",
            "attendance_marked_at",
        ]

    @staticmethod
    def resolve_team_members(obj: Registration) -> list[TeamMember]:
        """Only accepted members are part of the team."""
        return [member for member in obj.team_members.all() if member.status == TeamMember.Status.ACCEPTED]


class RegistrationInListSchema(ModelSchema):
    """Row in the organizer's registration list."""

    id: UUID
    participant: MinimalUserSchema
    team_size: int
    payment_amount: Decimal
    registered_at: datetime

    class Meta:
        model = Registration
        fields = [
            "status",
            "is_team_registration",
            "team_name",
            "payment_required",
            "payment_status",
            "payment_proof",
            "transaction_id",
            "ticket_id",
            "attendance_marked",
        ]
