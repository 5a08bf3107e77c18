"""Read-only projections over an event's registrations for its organizer."""

import csv
import io
from decimal import Decimal

from django.db.models import Count, Q, QuerySet, Sum
from django.utils import timezone

from events import schema
from events.models import Event, Registration

EXPORT_HEADER = [
    "Ticket ID",
    "Name",
    "Email",
    "Participant Type",
    "College",
    "Contact Number",
    "Status",
    "Registered At",
    "Attendance Marked",
]


def _sum(qs: QuerySet[Registration], field: str) -> Decimal:
    return qs.aggregate(total=Sum(field))["total"] or Decimal("0")


def registration_counts(event: Event) -> schema.RegistrationCountsSchema:
    """Registrations per status."""
    counts = {row["status"]: row["n"] for row in event.registrations.values("status").annotate(n=Count("id"))}
    return schema.RegistrationCountsSchema(
        total=sum(counts.values()),
        confirmed=counts.get(Registration.Status.CONFIRMED, 0),
        pending=counts.get(Registration.Status.PENDING, 0),
        cancelled=counts.get(Registration.Status.CANCELLED, 0),
        waitlisted=counts.get(Registration.Status.WAITLISTED, 0),
    )


def payment_summary(event: Event) -> schema.PaymentSummarySchema:
    """Payment counts per status and the amounts still pending or already approved."""
    paid = event.registrations.filter(payment_required=True)
    counts = {row["payment_status"]: row["n"] for row in paid.values("payment_status").annotate(n=Count("id"))}
    settled = Q(payment_status__in=[Registration.PaymentStatus.APPROVED, Registration.PaymentStatus.COMPLETED])
    pending_amount = _sum(
        paid.filter(payment_status=Registration.PaymentStatus.PENDING).exclude(status=Registration.Status.CANCELLED),
        "payment_amount",
    )
    approved_amount = _sum(paid.filter(settled), "payment_amount")
    return schema.PaymentSummarySchema(
        pending_amount=pending_amount,
        approved_amount=approved_amount,
        total_amount=pending_amount + approved_amount,
        pending=counts.get(Registration.PaymentStatus.PENDING, 0),
        approved=counts.get(Registration.PaymentStatus.APPROVED, 0),
        rejected=counts.get(Registration.PaymentStatus.REJECTED, 0),
        completed=counts.get(Registration.PaymentStatus.COMPLETED, 0),
    )


def get_event_analytics(event: Event) -> schema.EventAnalyticsSchema:
    """Counts by status, payments, attendance and participant type, plus confirmed revenue."""
    registrations = event.registrations.all()
    present = registrations.filter(attendance_marked=True).count()
    participant_types = [
        schema.ParticipantTypeCountSchema(participant_type=row["participant__participant_type"], count=row["n"])
        for row in registrations.values("participant__participant_type")
        .annotate(n=Count("id"))
        .order_by("participant__participant_type")
    ]
    return schema.EventAnalyticsSchema(
        event=schema.EventSummarySchema(
            id=event.pk,
            name=event.name,
            registration_limit=event.registration_limit,
            current_registrations=event.current_registrations,
        ),
        registrations=registration_counts(event),
        payments=payment_summary(event),
        attendance=schema.AttendanceSummarySchema(present=present, absent=registrations.count() - present),
        participant_types=participant_types,
        confirmed_revenue=_sum(registrations.filter(status=Registration.Status.CONFIRMED), "payment_amount"),
    )


def export_rows(event: Event) -> list[list[str]]:
    """One flat row per registration, in registration order."""
    rows = []
    qs = event.registrations.select_related("participant").order_by("created_at")
    for registration in qs:
        participant = registration.participant
        rows.append(
            [
                registration.ticket_id or "",
                participant.get_full_name() or participant.get_display_name(),
                participant.email,
                participant.get_participant_type_display() if participant.participant_type else "",
                participant.college,
                participant.contact_number,
                registration.get_status_display(),
                timezone.localtime(registration.created_at).strftime("%Y-%m-%d %H:%M"),
                "Yes" if registration.attendance_marked else "No",
            ]
        )
    return rows


def export_registrations_csv(event: Event) -> str:
    """Render :func:`export_rows` as CSV text with a header line."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_HEADER)
    writer.writerows(export_rows(event))
    return output.getvalue()
