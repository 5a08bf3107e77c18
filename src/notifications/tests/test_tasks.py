import typing as t
from unittest.mock import MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from django.core import mail

from events.models import Event, Registration
from notifications import tasks

pytestmark = pytest.mark.django_db


class TestSendTicketEmail:
    def test_sends_ticket_with_inline_code(self, confirmed_registration: Registration) -> None:
        result = tasks.send_ticket_email(
            registration_id=str(confirmed_registration.pk),
            recipient_name="Ada Lovelace",
            recipient_email="ada@example.test",
        )

        assert result is True
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["ada@example.test"]
        assert message.subject.startswith(f"Confirmation: {confirmed_registration.event.name} Ticket")
        assert "Ada Lovelace" in message.body
        assert confirmed_registration.ticket_id in message.body
        html, mimetype = message.alternatives[0]
        assert mimetype == "text/html"
        assert 'src="cid:ticketqrcode"' in html
        assert any(getattr(a, "get", lambda *_: None)("Content-ID") == "<ticketqrcode>" for a in message.attachments)

    def test_missing_registration_is_logged_not_raised(self) -> None:
        result = tasks.send_ticket_email(
            registration_id=str(uuid4()), recipient_name="Nobody", recipient_email="nobody@example.test"
        )

        assert result is False
        assert mail.outbox == []

    def test_code_is_rendered_again_when_missing(self, confirmed_registration: Registration) -> None:
        Registration.objects.filter(pk=confirmed_registration.pk).update(qr_code="")

        tasks.send_ticket_email(
            registration_id=str(confirmed_registration.pk),
            recipient_name="Ada Lovelace",
            recipient_email="ada@example.test",
        )

        html, _ = mail.outbox[0].alternatives[0]
        assert "cid:ticketqrcode" in html

    @patch("notifications.service.emails.EmailMultiAlternatives.send", side_effect=ConnectionRefusedError)
    def test_smtp_failure_returns_false(self, mock_send: MagicMock, confirmed_registration: Registration) -> None:
        result = tasks.send_ticket_email(
            registration_id=str(confirmed_registration.pk),
            recipient_name="Ada Lovelace",
            recipient_email="ada@example.test",
        )

        assert result is False
        mock_send.assert_called_once()


def test_send_merchandise_confirmation(
    t_shirt: t.Any, participant: t.Any, register: t.Callable[..., Registration]
) -> None:
    from events.service import payment_service

    registration = register(participant, t_shirt.event, merchandise=[{"item_id": t_shirt.pk, "variant": "S"}])
    payment_service.approve_payment(registration)

    assert tasks.send_merchandise_confirmation(registration_id=str(registration.pk)) is True

    message = mail.outbox[0]
    assert message.to == [participant.email]
    assert "1 x Fest T-Shirt (S)" in message.body
    assert 'src="cid:orderqrcode"' in message.alternatives[0][0]


class TestDiscord:
    def test_skipped_without_webhook(self, event: Event) -> None:
        with patch("notifications.tasks.httpx.post") as mock_post:
            assert tasks.notify_discord_event_published(event_id=str(event.pk)) is False

        mock_post.assert_not_called()

    @patch("notifications.tasks.httpx.post")
    def test_posts_embed(self, mock_post: MagicMock, event: Event, settings: t.Any) -> None:
        settings.DISCORD_WEBHOOK_URL = "https://discord.test/webhook"
        settings.DISCORD_WEBHOOK_TIMEOUT = 2.5

        assert tasks.notify_discord_event_published(event_id=str(event.pk)) is True

        _, kwargs = mock_post.call_args
        assert kwargs["timeout"] == 2.5
        embed = kwargs["json"]["embeds"][0]
        assert embed["url"].endswith(f"/events/{event.pk}")
        assert embed["description"] == event.description

    @patch("notifications.tasks.httpx.post")
    def test_http_error_returns_false(self, mock_post: MagicMock, event: Event, settings: t.Any) -> None:
        settings.DISCORD_WEBHOOK_URL = "https://discord.test/webhook"
        mock_post.return_value.raise_for_status.side_effect = httpx.HTTPStatusError(
            "boom", request=MagicMock(), response=MagicMock()
        )

        assert tasks.notify_discord_event_published(event_id=str(event.pk)) is False
