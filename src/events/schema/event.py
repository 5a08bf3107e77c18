import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import BaseModel, Field

from common.schema import OneToOneFiftyString
from events.models import Event, MerchandiseItem

FieldType = t.Literal["text", "number", "email", "tel", "textarea", "select", "checkbox", "radio", "file", "date"]


class CustomFormFieldSchema(BaseModel):
    """A single organizer-defined registration form field."""

    field_name: OneToOneFiftyString
    field_type: FieldType = "text"
    label: OneToOneFiftyString
    placeholder: str = ""
    required: bool = False
    options: list[str] = Field(default_factory=list)


class OrganizerSchema(Schema):
    id: UUID
    display_name: str


class MerchandiseItemSchema(ModelSchema):
    id: UUID
    price: Decimal

    class Meta:
        model = MerchandiseItem
        fields = [
            "name",
            "description",
            "sizes",
            "colors",
            "variants",
            "stock_quantity",
            "max_per_participant",
        ]


class MinimalEventSchema(Schema):
    id: UUID
    name: str
    event_type: Event.EventType
    status: Event.EventStatus
    event_start_date: datetime
    event_end_date: datetime
    organizer: OrganizerSchema


class EventSchema(ModelSchema):
    id: UUID
    organizer: OrganizerSchema
    registration_fee: Decimal
    available_slots: int
    custom_form_fields: list[CustomFormFieldSchema]
    merchandise_items: list[MerchandiseItemSchema]

    class Meta:
        model = Event
        fields = [
            "name",
            "description",
            "event_type",
            "status",
            "eligibility",
            "tags",
            "event_start_date",
            "event_end_date",
            "registration_deadline",
            "registration_limit",
            "current_registrations",
            "is_team_event",
            "team_size_min",
            "team_size_max",
        ]

    @staticmethod
    def resolve_merchandise_items(obj: Event) -> list[MerchandiseItem]:
        """Merchandise items are only listed for merchandise events."""
        return list(obj.merchandise_items.all()) if obj.is_merchandise else []
