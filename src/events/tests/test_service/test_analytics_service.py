import csv
import io
import typing as t
from decimal import Decimal

import pytest

from accounts.models import FelicityUser
from conftest import FelicityUserFactory
from events.models import Event, Registration
from events.service import analytics_service, payment_service, registration_service

pytestmark = pytest.mark.django_db

Register = t.Callable[..., Registration]


@pytest.fixture
def populated_event(
    paid_event: Event,
    participant: FelicityUser,
    non_iiit_participant: FelicityUser,
    organizer: FelicityUser,
    felicity_user_factory: FelicityUserFactory,
    register: Register,
) -> Event:
    """One attended approved payment, one pending payment, one rejected payment."""
    approved = register(participant, paid_event)
    payment_service.approve_payment(approved)
    registration_service.mark_attendance(approved, organizer)

    register(non_iiit_participant, paid_event)

    rejected = register(felicity_user_factory(participant_type=FelicityUser.ParticipantType.IIIT), paid_event)
    payment_service.reject_payment(rejected)
    return paid_event


def test_event_analytics(populated_event: Event) -> None:
    populated_event.refresh_from_db()

    analytics = analytics_service.get_event_analytics(populated_event)

    assert analytics.event.current_registrations == 2
    assert (analytics.registrations.total, analytics.registrations.confirmed) == (3, 1)
    assert (analytics.registrations.pending, analytics.registrations.cancelled) == (1, 1)
    assert analytics.registrations.waitlisted == 0
    assert analytics.payments.approved_amount == Decimal("100")
    assert analytics.payments.pending_amount == Decimal("100")
    assert analytics.payments.total_amount == Decimal("200")
    assert (analytics.payments.approved, analytics.payments.pending, analytics.payments.rejected) == (1, 1, 1)
    assert (analytics.attendance.present, analytics.attendance.absent) == (1, 2)
    assert {row.participant_type: row.count for row in analytics.participant_types} == {"iiit": 2, "non_iiit": 1}
    assert analytics.confirmed_revenue == Decimal("100")


def test_empty_event_analytics(event: Event) -> None:
    analytics = analytics_service.get_event_analytics(event)

    assert analytics.registrations.total == 0
    assert analytics.payments.total_amount == Decimal("0")
    assert analytics.participant_types == []


def test_export_csv(populated_event: Event, participant: FelicityUser) -> None:
    rows = list(csv.reader(io.StringIO(analytics_service.export_registrations_csv(populated_event))))

    assert rows[0] == analytics_service.EXPORT_HEADER
    assert len(rows) == 4
    first = rows[1]
    assert first[0].startswith("FEL-")
    assert first[1] == participant.get_full_name()
    assert first[2] == participant.email
    assert first[3:7] == ["IIIT", "IIIT Hyderabad", "9876543210", "Confirmed"]
    assert first[8] == "Yes"
    assert rows[2][0] == ""
    assert rows[2][8] == "No"
