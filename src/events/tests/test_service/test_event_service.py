import typing as t
from unittest.mock import MagicMock, patch

import httpx
import pytest

from events import exceptions
from events.models import Event
from events.service import event_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def draft(make_event: t.Callable[..., Event]) -> Event:
    return make_event(status=Event.EventStatus.DRAFT, description="Teams of two, bring your laptop.")


@patch("notifications.tasks.httpx.post")
def test_publish_draft_announces_on_discord(
    mock_post: MagicMock, draft: Event, settings: t.Any, django_capture_on_commit_callbacks: t.Any
) -> None:
    settings.DISCORD_WEBHOOK_URL = "https://discord.test/webhook"

    with django_capture_on_commit_callbacks(execute=True):
        published = event_service.publish_event(draft)

    assert published.status == Event.EventStatus.PUBLISHED
    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == "https://discord.test/webhook"
    embed = kwargs["json"]["embeds"][0]
    assert embed["title"] == f"New Event Published: {draft.name}"
    assert {"name": "Organizer", "value": "Programming Club", "inline": True} in embed["fields"]


@patch("notifications.tasks.httpx.post")
def test_webhook_failure_does_not_undo_publishing(
    mock_post: MagicMock, draft: Event, settings: t.Any, django_capture_on_commit_callbacks: t.Any
) -> None:
    settings.DISCORD_WEBHOOK_URL = "https://discord.test/webhook"
    mock_post.side_effect = httpx.ConnectError("unreachable")

    with django_capture_on_commit_callbacks(execute=True):
        event_service.publish_event(draft)

    draft.refresh_from_db()
    assert draft.status == Event.EventStatus.PUBLISHED


def test_only_drafts_can_be_published(event: Event) -> None:
    with pytest.raises(exceptions.InvalidStateError):
        event_service.publish_event(event)
