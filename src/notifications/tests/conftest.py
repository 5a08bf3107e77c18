import pytest

from accounts.models import FelicityUser
from events.models import Event, Registration
from events.service import ticket_issuer


@pytest.fixture
def confirmed_registration(event: Event, participant: FelicityUser) -> Registration:
    registration = Registration.objects.create(
        event=event, participant=participant, status=Registration.Status.CONFIRMED
    )
    ticket_issuer.issue_ticket(registration)
    return registration
