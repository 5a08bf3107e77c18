import typing as t
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core import mail
from freezegun import freeze_time

from accounts.models import FelicityUser
from conftest import FelicityUserFactory
from events import exceptions
from events.models import Event, Registration, TeamMember
from events.service import payment_service, registration_service, team_service

pytestmark = pytest.mark.django_db

Register = t.Callable[..., Registration]


@pytest.fixture
def team(team_event: Event, participant: FelicityUser, register: Register) -> Registration:
    return register(participant, team_event, is_team_registration=True, team_name="Null Pointers")


def _code(registration: Registration) -> str:
    return t.cast(str, registration.invite_code)


def test_invite_codes_are_uppercase_hex() -> None:
    code = team_service.generate_invite_code()

    assert len(code) == 8
    assert code == code.upper()
    int(code, 16)


def test_completing_team_confirms_and_tickets_everyone(
    team: Registration,
    participant: FelicityUser,
    teammate: FelicityUser,
    django_capture_on_commit_callbacks: t.Any,
) -> None:
    with django_capture_on_commit_callbacks(execute=True):
        joined = team_service.join_team(_code(team).lower(), teammate)

    assert joined.status == Registration.Status.CONFIRMED
    assert joined.team_size == 2
    assert joined.ticket_id and joined.ticket_id.startswith("FEL-")
    member = joined.team_members.get()
    assert (member.user, member.email, member.status) == (teammate, teammate.email, TeamMember.Status.ACCEPTED)
    assert sorted(message.to[0] for message in mail.outbox) == sorted([participant.email, teammate.email])


def test_team_holds_a_single_slot(team: Registration, teammate: FelicityUser, team_event: Event) -> None:
    team_service.join_team(_code(team), teammate)

    team_event.refresh_from_db()
    assert team_event.current_registrations == 1


def test_third_join_is_rejected(
    team: Registration, teammate: FelicityUser, felicity_user_factory: FelicityUserFactory
) -> None:
    team_service.join_team(_code(team), teammate)
    latecomer = felicity_user_factory(participant_type=FelicityUser.ParticipantType.IIIT)

    with pytest.raises(exceptions.TeamFullError):
        team_service.join_team(_code(team), latecomer)

    assert team.team_members.count() == 1


def test_unknown_invite_code(teammate: FelicityUser) -> None:
    with pytest.raises(exceptions.InvalidInviteCodeError):
        team_service.join_team("DEADBEEF", teammate)


def test_leader_cannot_join_own_team(team: Registration, participant: FelicityUser) -> None:
    with pytest.raises(exceptions.AlreadyRegisteredError):
        team_service.join_team(_code(team), participant)


def test_joining_twice(
    make_event: t.Callable[..., Event],
    participant: FelicityUser,
    teammate: FelicityUser,
    register: Register,
) -> None:
    big_team_event = make_event(is_team_event=True, team_size_min=2, team_size_max=4)
    team = register(participant, big_team_event, is_team_registration=True, team_name="Quad")
    team_service.join_team(_code(team), teammate)

    with pytest.raises(exceptions.AlreadyRegisteredError, match="already a member"):
        team_service.join_team(_code(team), teammate)


def test_registered_participant_cannot_join(
    team: Registration, team_event: Event, teammate: FelicityUser, register: Register
) -> None:
    register(teammate, team_event, is_team_registration=True, team_name="Rivals")

    with pytest.raises(exceptions.AlreadyRegisteredError):
        team_service.join_team(_code(team), teammate)


def test_organizer_cannot_join(team: Registration, organizer: FelicityUser) -> None:
    with pytest.raises(exceptions.WrongRoleError):
        team_service.join_team(_code(team), organizer)


def test_ineligible_member(
    make_event: t.Callable[..., Event],
    participant: FelicityUser,
    non_iiit_participant: FelicityUser,
    register: Register,
) -> None:
    iiit_team_event = make_event(
        is_team_event=True, team_size_min=2, team_size_max=2, eligibility=Event.Eligibility.IIIT_ONLY
    )
    team = register(participant, iiit_team_event, is_team_registration=True, team_name="Insiders")

    with pytest.raises(exceptions.NotEligibleError):
        team_service.join_team(_code(team), non_iiit_participant)


def test_join_after_deadline(team: Registration, team_event: Event, teammate: FelicityUser) -> None:
    with freeze_time(team_event.registration_deadline + timedelta(hours=1)):
        with pytest.raises(exceptions.RegistrationClosedError):
            team_service.join_team(_code(team), teammate)


def test_join_does_not_need_a_free_slot(
    make_event: t.Callable[..., Event], participant: FelicityUser, teammate: FelicityUser, register: Register
) -> None:
    full_event = make_event(is_team_event=True, team_size_min=2, team_size_max=2, registration_limit=1)
    team = register(participant, full_event, is_team_registration=True, team_name="Last Team")

    joined = team_service.join_team(_code(team), teammate)

    assert joined.status == Registration.Status.CONFIRMED


def test_cancelled_team_cannot_be_joined(team: Registration, participant: FelicityUser, teammate: FelicityUser) -> None:
    registration_service.cancel_registration(team.pk, participant)

    with pytest.raises(exceptions.InvalidStateError):
        team_service.join_team(_code(team), teammate)


class TestPaidTeam:
    @pytest.fixture
    def paid_team(
        self, make_event: t.Callable[..., Event], participant: FelicityUser, register: Register
    ) -> Registration:
        event = make_event(
            name="Paid CTF", is_team_event=True, team_size_min=2, team_size_max=2, registration_fee=Decimal("200")
        )
        return register(participant, event, is_team_registration=True, team_name="Payers")

    def test_join_then_approve(self, paid_team: Registration, teammate: FelicityUser) -> None:
        joined = team_service.join_team(_code(paid_team), teammate)
        assert joined.status == Registration.Status.PENDING

        approved = payment_service.approve_payment(paid_team)

        assert approved.status == Registration.Status.CONFIRMED
        assert approved.ticket_id

    def test_approve_then_join(self, paid_team: Registration, teammate: FelicityUser) -> None:
        approved = payment_service.approve_payment(paid_team)
        assert approved.status == Registration.Status.PENDING
        assert approved.payment_status == Registration.PaymentStatus.APPROVED

        joined = team_service.join_team(_code(paid_team), teammate)

        assert joined.status == Registration.Status.CONFIRMED
        assert joined.ticket_id


def test_single_person_team_is_confirmed_on_registration(
    make_event: t.Callable[..., Event], participant: FelicityUser, register: Register
) -> None:
    solo_event = make_event(name="Solo Quiz", is_team_event=True, team_size_min=1, team_size_max=3)

    registration = register(
        participant, solo_event, is_team_registration=True, team_name="Lone Wolf", target_team_size=1
    )

    assert registration.status == Registration.Status.CONFIRMED
    assert registration.ticket_id and registration.ticket_id.startswith("FEL-")
