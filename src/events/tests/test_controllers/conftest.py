import pytest
from django.test.client import Client
from ninja_jwt.tokens import RefreshToken

from accounts.models import FelicityUser
from conftest import FelicityUserFactory


def _client_for(user: FelicityUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def participant_client(participant: FelicityUser) -> Client:
    """API client for an IIIT participant."""
    return _client_for(participant)


@pytest.fixture
def teammate_client(teammate: FelicityUser) -> Client:
    return _client_for(teammate)


@pytest.fixture
def organizer_client(organizer: FelicityUser) -> Client:
    """API client for the organizer owning the test events."""
    return _client_for(organizer)


@pytest.fixture
def other_organizer_client(felicity_user_factory: FelicityUserFactory) -> Client:
    return _client_for(felicity_user_factory(role=FelicityUser.Role.ORGANIZER, organizer_name="Dance Club"))
