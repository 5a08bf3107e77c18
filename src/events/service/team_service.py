"""Team creation, invite codes and membership."""

import secrets

import structlog
from django.db import transaction

from accounts.models import FelicityUser
from events import exceptions
from events.models import Event, Registration, TeamMember
from events.schema import RegistrationCreateSchema
from events.service import lifecycle

logger = structlog.get_logger(__name__)

MAX_CODE_ATTEMPTS = 10


def generate_invite_code() -> str:
    """Eight uppercase hex characters."""
    return secrets.token_hex(4).upper()


def unique_invite_code() -> str:
    """An invite code no other registration uses yet."""
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_invite_code()
        if not Registration.objects.filter(invite_code=code).exists():
            return code
    return secrets.token_hex(8).upper()


def prepare_team(registration: Registration, event: Event, payload: RegistrationCreateSchema) -> None:
    """Turn an unsaved registration into a pending team registration led by its participant."""
    if not event.is_team_event:
        raise exceptions.RegistrationValidationError("This event does not accept team registrations.")
    if not payload.team_name:
        raise exceptions.RegistrationValidationError("Team name is required for team registration.")

    target = payload.target_team_size or event.team_size_max
    size_min, size_max = event.team_size_min or 1, event.team_size_max or 1
    if target is None or not size_min <= target <= size_max:
        raise exceptions.InvalidTeamSizeError(f"Team size must be between {size_min} and {size_max}.")

    registration.is_team_registration = True
    registration.team_name = payload.team_name
    registration.target_team_size = target
    registration.invite_code = unique_invite_code()
    registration.status = Registration.Status.PENDING


@transaction.atomic
def join_team(invite_code: str, participant: FelicityUser) -> Registration:
    """Add the participant to the team owning ``invite_code``.

    The team already holds its capacity slot, so joining only checks that the
    event still accepts registrations. Completing the team confirms the
    registration when its payment (if any) is settled.
    """
    if not participant.is_participant:
        raise exceptions.WrongRoleError()

    found = Registration.objects.filter(invite_code=invite_code.strip().upper()).first()
    if found is None:
        raise exceptions.InvalidInviteCodeError()
    event, registration = lifecycle.lock(found)

    if registration.status == Registration.Status.CANCELLED:
        raise exceptions.InvalidStateError("This team registration has been cancelled.")
    if not event.is_accepting_registrations():
        raise exceptions.RegistrationClosedError()
    if not event.is_eligible(participant):
        raise exceptions.NotEligibleError()
    if registration.team_members.filter(user=participant, status=TeamMember.Status.ACCEPTED).exists():
        raise exceptions.AlreadyRegisteredError("You are already a member of this team.")
    if lifecycle.has_active_registration(event, participant):
        raise exceptions.AlreadyRegisteredError()
    if registration.team_size >= (registration.target_team_size or 1):
        raise exceptions.TeamFullError()

    TeamMember.objects.create(
        registration=registration,
        event=event,
        user=participant,
        name=participant.get_full_name() or participant.get_display_name(),
        email=participant.email,
        status=TeamMember.Status.ACCEPTED,
    )
    logger.info(
        "team_member_joined",
        registration_id=str(registration.pk),
        user_id=str(participant.pk),
        team_size=registration.team_size,
        target_team_size=registration.target_team_size,
    )
    lifecycle.refresh_confirmation(registration)
    return registration
