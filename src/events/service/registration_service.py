"""Registration engine: turns a participant's intent into a pending or confirmed seat."""

import typing as t
from collections import defaultdict
from decimal import Decimal
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import FelicityUser
from events import exceptions
from events.filters import MyRegistrationsFilterSchema
from events.models import Event, MerchandiseItem, MerchandiseOrderLine, Registration
from events.schema import MerchandiseSelectionSchema, RegistrationCreateSchema
from events.service import capacity_ledger, lifecycle, team_service, ticket_issuer
from notifications.service import dispatcher

logger = structlog.get_logger(__name__)


def _is_blank(value: t.Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def validate_form_responses(event: Event, responses: dict[str, t.Any]) -> None:
    """Every required organizer-defined field must carry a value."""
    for field in event.custom_form_fields or []:
        name = field.get("field_name")
        label = field.get("label") or name
        value = responses.get(name)
        if field.get("required") and _is_blank(value):
            raise exceptions.MissingFormFieldError(label)
        options = field.get("options") or []
        if options and field.get("field_type") in ("select", "radio") and not _is_blank(value):
            if value not in options:
                raise exceptions.RegistrationValidationError(f"{label} must be one of: {', '.join(options)}.")


def _build_order_lines(
    registration: Registration, event: Event, selections: list[MerchandiseSelectionSchema]
) -> list[MerchandiseOrderLine]:
    """Validate the selection against limits and live stock. Stock is not taken here."""
    if not event.is_merchandise:
        raise exceptions.InvalidMerchandiseSelectionError("This event does not sell merchandise.")
    if not selections:
        raise exceptions.InvalidMerchandiseSelectionError("Select at least one merchandise item.")

    wanted_ids = [selection.item_id for selection in selections]
    items = {item.pk: item for item in MerchandiseItem.objects.filter(event=event, pk__in=wanted_ids)}
    per_item: dict[UUID, int] = defaultdict(int)
    lines = []
    for selection in selections:
        item = items.get(selection.item_id)
        if item is None:
            raise exceptions.InvalidMerchandiseSelectionError(f"Invalid merchandise item: {selection.item_id}")
        per_item[item.pk] += selection.quantity
        if per_item[item.pk] > item.max_per_participant:
            raise exceptions.InvalidMerchandiseSelectionError(f"Quantity exceeds limit for {item.name}.")
        if per_item[item.pk] > item.stock_quantity:
            raise exceptions.InsufficientStockError(item.name, item.stock_quantity)
        lines.append(
            MerchandiseOrderLine(
                registration=registration,
                item=item,
                name=item.name,
                variant=selection.variant,
                quantity=selection.quantity,
                price=item.price,
            )
        )
    return lines


def _apply_payment(
    registration: Registration, event: Event, payload: RegistrationCreateSchema, has_merchandise: bool
) -> None:
    """Merchandise always goes through approval since that is where stock is taken."""
    amount = registration.merchandise_total + (event.registration_fee or Decimal("0"))
    if has_merchandise or event.registration_fee > 0 or payload.payment_proof:
        registration.payment_required = True
        registration.payment_amount = amount
        registration.payment_status = Registration.PaymentStatus.PENDING
        registration.status = Registration.Status.PENDING
    registration.payment_proof = payload.payment_proof or ""
    registration.transaction_id = payload.transaction_id or ""


@transaction.atomic
def register_for_event(participant: FelicityUser, event_id: UUID, payload: RegistrationCreateSchema) -> Registration:
    """Register a participant for an event.

    Free individual registrations are confirmed and ticketed immediately. Team,
    merchandise and paid registrations stay pending until their team is complete
    and their payment approved. Every registration holds one capacity slot.
    """
    if not participant.is_participant:
        raise exceptions.WrongRoleError()

    event = Event.objects.select_for_update().filter(pk=event_id).first()
    if event is None:
        raise exceptions.EventNotFoundError()
    if not event.is_accepting_registrations():
        raise exceptions.RegistrationClosedError()
    if not event.is_eligible(participant):
        if event.eligibility == Event.Eligibility.IIIT_ONLY:
            raise exceptions.NotEligibleError("This event is only for IIIT students.")
        raise exceptions.NotEligibleError("This event is only for Non-IIIT participants.")
    if lifecycle.has_active_registration(event, participant):
        raise exceptions.AlreadyRegisteredError()
    if not event.has_available_slots():
        raise exceptions.CapacityExhaustedError("Registration limit reached. Event is full.")

    validate_form_responses(event, payload.form_responses)

    registration = Registration(
        event=event,
        participant=participant,
        form_responses=payload.form_responses,
        status=Registration.Status.CONFIRMED,
    )
    if payload.is_team_registration:
        team_service.prepare_team(registration, event, payload)

    lines: list[MerchandiseOrderLine] = []
    if event.is_merchandise or payload.merchandise:
        lines = _build_order_lines(registration, event, payload.merchandise)
        registration.merchandise_total = sum((line.line_total for line in lines), Decimal("0"))

    _apply_payment(registration, event, payload, has_merchandise=bool(lines))

    capacity_ledger.increment_registrations(event)
    registration.save()
    for line in lines:
        line.save()

    logger.info(
        "registration_created",
        registration_id=str(registration.pk),
        event_id=str(event.pk),
        user_id=str(participant.pk),
        status=registration.status,
        is_team=registration.is_team_registration,
        payment_required=registration.payment_required,
    )

    if registration.status == Registration.Status.CONFIRMED:
        ticket_issuer.issue_ticket(registration)
        dispatcher.notify_registration_confirmed(registration)
    else:
        # a single-person team is complete as soon as it exists
        lifecycle.refresh_confirmation(registration)
    return registration


@transaction.atomic
def cancel_registration(registration_id: UUID, requester: FelicityUser) -> Registration:
    """Cancel the requester's own registration before the event starts."""
    found = Registration.objects.filter(pk=registration_id).first()
    if found is None:
        raise exceptions.RegistrationNotFoundError()
    if found.participant_id != requester.pk:
        raise exceptions.RegistrationPermissionError("You can only cancel your own registrations.")

    event, registration = lifecycle.lock(found)
    if registration.status == Registration.Status.CANCELLED:
        raise exceptions.InvalidStateError("Registration is already cancelled.")
    if timezone.now() >= event.event_start_date:
        raise exceptions.InvalidStateError("Cannot cancel registration after event has started.")
    return lifecycle.cancel(registration)


def my_registrations(user: FelicityUser, filters: MyRegistrationsFilterSchema) -> QuerySet[Registration]:
    """Registrations the user leads or belongs to, newest first.

    Confirmed registrations that are missing their ticket id or code are repaired
    on the way out.
    """
    mine = Registration.objects.for_user(user)
    for registration in mine.filter(status=Registration.Status.CONFIRMED):
        if ticket_issuer.needs_ticket(registration):
            logger.info("ticket_repair", registration_id=str(registration.pk))
            ticket_issuer.issue_ticket(registration)
    return filters.filter(mine.full()).order_by("-created_at")


def get_registration_by_ticket(ticket_id: str, viewer: FelicityUser) -> Registration:
    """Look a registration up by ticket id for its holders or the event's organizer."""
    registration = Registration.objects.full().filter(ticket_id=ticket_id.strip().upper()).first()
    if registration is None:
        raise exceptions.RegistrationNotFoundError("Ticket not found.")
    is_holder = registration.participant_id == viewer.pk or registration.team_members.filter(user=viewer).exists()
    if not (is_holder or registration.event.organizer_id == viewer.pk or viewer.is_staff):
        raise exceptions.RegistrationPermissionError("You do not have access to this ticket.")
    return registration


@transaction.atomic
def mark_attendance(registration: Registration, marked_by: FelicityUser) -> Registration:
    """Record that a confirmed registration showed up."""
    _, registration = lifecycle.lock(registration)
    if registration.status != Registration.Status.CONFIRMED:
        raise exceptions.InvalidStateError("Only confirmed registrations can be checked in.")
    if registration.attendance_marked:
        raise exceptions.AttendanceAlreadyMarkedError()
    registration.attendance_marked = True
    registration.attendance_marked_at = timezone.now()
    registration.attendance_marked_by = marked_by
    registration.save(
        update_fields=["attendance_marked", "attendance_marked_at", "attendance_marked_by", "updated_at"]
    )
    logger.info("attendance_marked", registration_id=str(registration.pk), marked_by=str(marked_by.pk))
    return registration


def mark_attendance_by_ticket(event: Event, ticket_id: str, marked_by: FelicityUser) -> Registration:
    """Mark attendance from a scanned ticket id."""
    registration = Registration.objects.filter(event=event, ticket_id=ticket_id.strip().upper()).first()
    if registration is None:
        raise exceptions.RegistrationNotFoundError("Ticket not found.")
    return mark_attendance(registration, marked_by)
