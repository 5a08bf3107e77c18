"""Payment gate: organizer approval or rejection of a registration's payment."""

import structlog
from django.db import transaction
from django.utils import timezone

from events import exceptions
from events.models import Registration
from events.service import lifecycle, stock_ledger

logger = structlog.get_logger(__name__)


def _ensure_pending_payment(registration: Registration) -> None:
    if not registration.payment_required:
        raise exceptions.InvalidStateError("This registration does not require a payment.")
    if registration.status == Registration.Status.CANCELLED:
        raise exceptions.InvalidStateError("This registration has been cancelled.")
    if registration.payment_status != Registration.PaymentStatus.PENDING:
        raise exceptions.InvalidStateError(f"Payment is already {registration.payment_status}.")


@transaction.atomic
def approve_payment(registration: Registration) -> Registration:
    """Approve a pending payment.

    Purchased merchandise is taken out of stock all at once; any shortfall fails
    the whole approval and the payment stays pending. The registration is then
    confirmed if its team (when it has one) is complete.
    """
    _, registration = lifecycle.lock(registration)
    _ensure_pending_payment(registration)

    lines = list(registration.merchandise_lines.all())
    if lines:
        stock_ledger.reserve((line.item_id, line.quantity) for line in lines)

    registration.payment_status = Registration.PaymentStatus.APPROVED
    registration.paid_at = timezone.now()
    registration.save(update_fields=["payment_status", "paid_at", "updated_at"])
    logger.info(
        "payment_approved",
        registration_id=str(registration.pk),
        amount=str(registration.payment_amount),
        merchandise_lines=len(lines),
    )

    lifecycle.refresh_confirmation(registration)
    return registration


@transaction.atomic
def reject_payment(registration: Registration) -> Registration:
    """Reject a pending payment, cancelling the registration and freeing its slot."""
    _, registration = lifecycle.lock(registration)
    _ensure_pending_payment(registration)

    registration.payment_status = Registration.PaymentStatus.REJECTED
    registration.save(update_fields=["payment_status", "updated_at"])
    logger.info("payment_rejected", registration_id=str(registration.pk))
    return lifecycle.cancel(registration)
