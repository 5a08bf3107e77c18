import typing as t

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import FelicityUser
from events.models import Event, Registration

pytestmark = pytest.mark.django_db

Register = t.Callable[..., Registration]


def test_join_team(
    teammate_client: Client, team_event: Event, participant: FelicityUser, register: Register
) -> None:
    team = register(participant, team_event, is_team_registration=True, team_name="Null Pointers")

    response = teammate_client.post(
        reverse("api:join_team"),
        data=orjson.dumps({"invite_code": team.invite_code}),
        content_type="application/json",
    )

    assert response.status_code == 200, response.content
    data = response.json()
    assert data["status"] == "confirmed"
    assert data["team_size"] == 2
    assert len(data["team_members"]) == 1


def test_join_team_with_bad_code(teammate_client: Client) -> None:
    response = teammate_client.post(
        reverse("api:join_team"), data=orjson.dumps({"invite_code": "NOPE1234"}), content_type="application/json"
    )

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_cancel_registration(participant_client: Client, event: Event, participant: FelicityUser, register: Register) -> None:
    registration = register(participant, event)

    response = participant_client.post(
        reverse("api:cancel_registration", kwargs={"registration_id": registration.pk})
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    event.refresh_from_db()
    assert event.current_registrations == 0

    response = participant_client.post(
        reverse("api:cancel_registration", kwargs={"registration_id": registration.pk})
    )
    assert response.status_code == 409


def test_cannot_cancel_someone_elses_registration(
    teammate_client: Client, event: Event, participant: FelicityUser, register: Register
) -> None:
    registration = register(participant, event)

    response = teammate_client.post(reverse("api:cancel_registration", kwargs={"registration_id": registration.pk}))

    assert response.status_code == 403


def test_my_registrations(
    participant_client: Client, event: Event, paid_event: Event, participant: FelicityUser, register: Register
) -> None:
    register(participant, event)
    register(participant, paid_event)

    response = participant_client.get(reverse("api:my_registrations"))
    assert response.status_code == 200
    assert response.json()["count"] == 2

    response = participant_client.get(reverse("api:my_registrations"), {"status": "pending"})
    results = response.json()["results"]
    assert [r["event"]["id"] for r in results] == [str(paid_event.pk)]


def test_ticket_lookup(
    participant_client: Client,
    teammate_client: Client,
    event: Event,
    participant: FelicityUser,
    register: Register,
) -> None:
    registration = register(participant, event)
    url = reverse("api:get_registration_by_ticket", kwargs={"ticket_id": registration.ticket_id})

    response = participant_client.get(url)
    assert response.status_code == 200
    assert response.json()["ticket_id"] == registration.ticket_id

    response = teammate_client.get(url)
    assert response.status_code == 403
