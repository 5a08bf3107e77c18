"""Builds the ticket and merchandise emails."""

import base64
from email.mime.image import MIMEImage

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from events.exceptions import TicketCodeGenerationError
from events.models import Event, Registration
from events.service import ticket_issuer

logger = structlog.get_logger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"


def _qr_png(registration: Registration) -> bytes | None:
    """PNG bytes of the ticket code, rendered afresh if the stored one is missing."""
    data_url = registration.qr_code
    if not data_url and registration.ticket_id:
        try:
            data_url = ticket_issuer.render_qr_code(registration.ticket_id)
        except TicketCodeGenerationError:
            logger.warning("email_without_ticket_code", registration_id=str(registration.pk))
            return None
    if not data_url or not data_url.startswith(DATA_URL_PREFIX):
        return None
    return base64.b64decode(data_url.removeprefix(DATA_URL_PREFIX))


def _attach_inline_image(message: EmailMultiAlternatives, png: bytes, content_id: str) -> None:
    image = MIMEImage(png, _subtype="png")
    image.add_header("Content-ID", f"<{content_id}>")
    image.add_header("Content-Disposition", "inline", filename=f"{content_id}.png")
    message.mixed_subtype = "related"
    message.attach(image)


def _event_context(registration: Registration) -> dict[str, object]:
    event = registration.event
    return {
        "site_name": settings.SITE_NAME,
        "event": event,
        "organizer_name": event.organizer.get_display_name(),
        "event_start": timezone.localtime(event.event_start_date).strftime("%A, %B %d, %Y at %I:%M %p"),
        "event_url": f"{settings.FRONTEND_BASE_URL}/events/{event.pk}",
        "registration": registration,
    }


def build_ticket_email(registration: Registration, recipient_name: str, recipient_email: str) -> EmailMultiAlternatives:
    """Ticket confirmation for one person attending through ``registration``."""
    png = _qr_png(registration)
    context = {**_event_context(registration), "recipient_name": recipient_name, "has_qr_code": png is not None}
    subject = f"Confirmation: {registration.event.name} Ticket - {settings.SITE_NAME}"
    message = EmailMultiAlternatives(
        subject=subject,
        body=render_to_string("notifications/emails/ticket.txt", context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient_email],
    )
    message.attach_alternative(render_to_string("notifications/emails/ticket.html", context), "text/html")
    if png is not None:
        _attach_inline_image(message, png, "ticketqrcode")
    return message


def build_merchandise_confirmation(registration: Registration) -> EmailMultiAlternatives:
    """Order confirmation listing the purchased items."""
    png = _qr_png(registration)
    participant = registration.participant
    context = {
        **_event_context(registration),
        "recipient_name": participant.get_display_name(),
        "lines": list(registration.merchandise_lines.all()),
        "has_qr_code": png is not None,
    }
    subject = f"Order Confirmed: {registration.event.name} Merchandise - {settings.SITE_NAME}"
    message = EmailMultiAlternatives(
        subject=subject,
        body=render_to_string("notifications/emails/merchandise_confirmation.txt", context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[participant.email],
    )
    message.attach_alternative(
        render_to_string("notifications/emails/merchandise_confirmation.html", context), "text/html"
    )
    if png is not None:
        _attach_inline_image(message, png, "orderqrcode")
    return message


def build_discord_embed(event: Event) -> dict[str, object]:
    """Webhook payload announcing a published event."""
    description = event.description or ""
    if len(description) > 200:
        description = description[:200] + "..."
    return {
        "embeds": [
            {
                "title": f"New Event Published: {event.name}",
                "description": description,
                "url": f"{settings.FRONTEND_BASE_URL}/events/{event.pk}",
                "color": 5814783,
                "fields": [
                    {
                        "name": "Date",
                        "value": timezone.localtime(event.event_start_date).strftime("%Y-%m-%d %H:%M"),
                        "inline": True,
                    },
                    {"name": "Type", "value": event.get_event_type_display(), "inline": True},
                    {"name": "Organizer", "value": event.organizer.get_display_name(), "inline": True},
                ],
                "footer": {"text": f"{settings.SITE_NAME} Event Management System"},
                "timestamp": timezone.now().isoformat(),
            }
        ]
    }
