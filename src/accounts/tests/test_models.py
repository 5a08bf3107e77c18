import pytest

from accounts.models import FelicityUser
from conftest import FelicityUserFactory

pytestmark = pytest.mark.django_db


def test_organizer_display_name(organizer: FelicityUser) -> None:
    assert organizer.display_name == "Programming Club"


def test_participant_display_name_is_full_name(felicity_user_factory: FelicityUserFactory) -> None:
    user = felicity_user_factory(first_name="Ada", last_name="Lovelace")

    assert user.display_name == "Ada Lovelace"


def test_display_name_falls_back_to_username(felicity_user_factory: FelicityUserFactory) -> None:
    user = felicity_user_factory(username="ada_lovelace@iiit.test", first_name="", last_name="")

    assert user.display_name == "Ada Lovelace"


def test_role_querysets(participant: FelicityUser, organizer: FelicityUser) -> None:
    assert list(FelicityUser.objects.participants()) == [participant]
    assert list(FelicityUser.objects.organizers()) == [organizer]
