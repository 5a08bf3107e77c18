"""Ticket identifiers and scannable codes for confirmed registrations."""

import base64
import secrets
from io import BytesIO

import qrcode
import structlog
from qrcode.exceptions import DataOverflowError

from events.exceptions import TicketCodeGenerationError
from events.models import Registration

logger = structlog.get_logger(__name__)

TICKET_PREFIX = "FEL-"
PROVISIONAL_TICKET_PREFIX = "TKT-"
MAX_ID_ATTEMPTS = 10


def generate_ticket_id() -> str:
    """A short human readable id such as ``FEL-3FA9C01B``."""
    return f"{TICKET_PREFIX}{secrets.token_hex(4).upper()}"


def _unique_ticket_id() -> str:
    for _ in range(MAX_ID_ATTEMPTS):
        ticket_id = generate_ticket_id()
        if not Registration.objects.filter(ticket_id=ticket_id).exists():
            return ticket_id
    # the unique constraint on ticket_id still has the last word
    return generate_ticket_id()


def render_qr_code(ticket_id: str) -> str:
    """Render the ticket id as a PNG QR code and return it as a data URL."""
    try:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(ticket_id)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buffered = BytesIO()
        img.save(buffered, "PNG")
    except (DataOverflowError, ValueError, OSError) as e:
        raise TicketCodeGenerationError() from e
    return "data:image/png;base64," + base64.b64encode(buffered.getvalue()).decode("utf-8")


def needs_ticket(registration: Registration) -> bool:
    """A ticket id is missing, still provisional or its code was never rendered."""
    return (
        not registration.ticket_id
        or registration.ticket_id.startswith(PROVISIONAL_TICKET_PREFIX)
        or not registration.qr_code
    )


def issue_ticket(registration: Registration) -> tuple[str, str]:
    """Assign a ticket id and scannable code to a registration.

    Idempotent: a registration that already has a final ticket id and code is
    returned unchanged. Provisional ``TKT-`` ids are replaced. If the code cannot
    be rendered the id is still stored and the code is left empty so it can be
    repaired later.
    """
    if not needs_ticket(registration):
        return _ticket_of(registration)

    update_fields = []
    if not registration.ticket_id or registration.ticket_id.startswith(PROVISIONAL_TICKET_PREFIX):
        registration.ticket_id = _unique_ticket_id()
        registration.qr_code = ""
        update_fields += ["ticket_id", "qr_code"]

    try:
        registration.qr_code = render_qr_code(registration.ticket_id)  # type: ignore[arg-type]
        if "qr_code" not in update_fields:
            update_fields.append("qr_code")
    except TicketCodeGenerationError:
        logger.exception(
            "ticket_code_generation_failed",
            registration_id=str(registration.pk),
            ticket_id=registration.ticket_id,
        )

    if update_fields:
        registration.save(update_fields=[*update_fields, "updated_at"])
    logger.info("ticket_issued", registration_id=str(registration.pk), ticket_id=registration.ticket_id)
    return _ticket_of(registration)


def _ticket_of(registration: Registration) -> tuple[str, str]:
    """The ticket id and code currently stored on the registration."""
    return registration.ticket_id or "", registration.qr_code
