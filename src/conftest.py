"""Fixtures shared by every app's tests."""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta
from decimal import Decimal

import faker
import pytest
from django.core.cache import cache
from django.utils import timezone
from pytest import MonkeyPatch

from accounts.models import FelicityUser
from events.models import Event, MerchandiseItem
from events.schema import MerchandiseSelectionSchema, RegistrationCreateSchema
from events.service import registration_service


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits for throttled endpoints to allow testing."""
    monkeypatch.setattr("common.throttling.AuthThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.RegistrationThrottle.rate", "1000/min")


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously.

    This ensures that Celery tasks run immediately in the same process,
    allowing tests to verify their side effects without async complications.
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Throttle counters live in the cache; start every test from an empty one."""
    cache.clear()


@pytest.fixture(autouse=True)
def no_discord_webhook(settings: t.Any) -> None:
    """Tests that exercise the webhook configure it explicitly."""
    settings.DISCORD_WEBHOOK_URL = ""


class FelicityUserFactory:
    """Factory for creating FelicityUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> FelicityUser:
        username = kwargs.pop("username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(10)))
        email = kwargs.pop("email", f"{username}@user.test")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return FelicityUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> FelicityUser:
        return self.create_user(**kwargs)


@pytest.fixture
def felicity_user_factory() -> FelicityUserFactory:
    return FelicityUserFactory()


@pytest.fixture
def participant(felicity_user_factory: FelicityUserFactory) -> FelicityUser:
    """An IIIT student."""
    return felicity_user_factory(
        role=FelicityUser.Role.PARTICIPANT,
        participant_type=FelicityUser.ParticipantType.IIIT,
        college="IIIT Hyderabad",
        contact_number="9876543210",
    )


@pytest.fixture
def non_iiit_participant(felicity_user_factory: FelicityUserFactory) -> FelicityUser:
    return felicity_user_factory(
        role=FelicityUser.Role.PARTICIPANT,
        participant_type=FelicityUser.ParticipantType.NON_IIIT,
        college="Osmania University",
    )


@pytest.fixture
def organizer(felicity_user_factory: FelicityUserFactory) -> FelicityUser:
    return felicity_user_factory(
        role=FelicityUser.Role.ORGANIZER,
        organizer_name="Programming Club",
        category=FelicityUser.OrganizerCategory.CLUB,
        contact_email="club@felicity.test",
    )


@pytest.fixture
def superuser(felicity_user_factory: FelicityUserFactory) -> FelicityUser:
    """A superuser."""
    return felicity_user_factory(is_superuser=True, is_staff=True, role=FelicityUser.Role.ADMIN)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )


@pytest.fixture
def make_event(organizer: FelicityUser, next_week: datetime) -> t.Callable[..., Event]:
    """Build published events starting next week, closing registrations a day before."""

    def _make_event(**kwargs: t.Any) -> Event:
        defaults: dict[str, t.Any] = {
            "organizer": organizer,
            "name": "Hackathon",
            "description": "24 hours of building.",
            "status": Event.EventStatus.PUBLISHED,
            "event_start_date": next_week,
            "event_end_date": next_week + timedelta(hours=24),
            "registration_deadline": next_week - timedelta(days=1),
            "registration_limit": 100,
        }
        defaults.update(kwargs)
        return Event.objects.create(**defaults)

    return _make_event


@pytest.fixture
def event(make_event: t.Callable[..., Event]) -> Event:
    """A free individual event."""
    return make_event()


@pytest.fixture
def paid_event(make_event: t.Callable[..., Event]) -> Event:
    return make_event(name="Workshop", registration_fee=Decimal("100"))


@pytest.fixture
def team_event(make_event: t.Callable[..., Event]) -> Event:
    """Teams of exactly two."""
    return make_event(name="Capture the Flag", is_team_event=True, team_size_min=2, team_size_max=2)


@pytest.fixture
def merchandise_event(make_event: t.Callable[..., Event]) -> Event:
    return make_event(name="Fest Merch", event_type=Event.EventType.MERCHANDISE)


@pytest.fixture
def t_shirt(merchandise_event: Event) -> MerchandiseItem:
    return MerchandiseItem.objects.create(
        event=merchandise_event,
        name="Fest T-Shirt",
        sizes=["S", "M", "L"],
        price=Decimal("350"),
        stock_quantity=1,
        max_per_participant=2,
    )


@pytest.fixture
def teammate(felicity_user_factory: FelicityUserFactory) -> FelicityUser:
    return felicity_user_factory(
        role=FelicityUser.Role.PARTICIPANT, participant_type=FelicityUser.ParticipantType.IIIT
    )


@pytest.fixture
def register() -> t.Callable[..., t.Any]:
    """Shortcut around the registration engine taking plain keyword arguments."""

    def _register(participant: FelicityUser, event: Event, **payload: t.Any) -> t.Any:
        if "merchandise" in payload:
            payload["merchandise"] = [MerchandiseSelectionSchema(**line) for line in payload["merchandise"]]
        return registration_service.register_for_event(participant, event.pk, RegistrationCreateSchema(**payload))

    return _register
