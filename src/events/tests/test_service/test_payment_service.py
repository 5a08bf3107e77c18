import typing as t
from decimal import Decimal

import pytest
from django.core import mail

from accounts.models import FelicityUser
from events import exceptions
from events.models import Event, MerchandiseItem, Registration
from events.service import payment_service, registration_service, ticket_issuer

pytestmark = pytest.mark.django_db

Register = t.Callable[..., Registration]


class TestPaidEvent:
    def test_approval_confirms_and_issues_ticket(
        self,
        paid_event: Event,
        participant: FelicityUser,
        register: Register,
        django_capture_on_commit_callbacks: t.Any,
    ) -> None:
        registration = register(participant, paid_event, payment_proof="proofs/upi.png")

        with django_capture_on_commit_callbacks(execute=True):
            approved = payment_service.approve_payment(registration)

        assert approved.status == Registration.Status.CONFIRMED
        assert approved.payment_status == Registration.PaymentStatus.APPROVED
        assert approved.paid_at is not None
        assert approved.ticket_id and approved.ticket_id.startswith("FEL-")
        assert len(mail.outbox) == 1

    def test_rejection_cancels_and_frees_the_slot(
        self, paid_event: Event, participant: FelicityUser, register: Register
    ) -> None:
        registration = register(participant, paid_event)
        paid_event.refresh_from_db()
        assert paid_event.current_registrations == 1

        rejected = payment_service.reject_payment(registration)

        assert rejected.status == Registration.Status.CANCELLED
        assert rejected.payment_status == Registration.PaymentStatus.REJECTED
        paid_event.refresh_from_db()
        assert paid_event.current_registrations == 0

    def test_decision_is_final(self, paid_event: Event, participant: FelicityUser, register: Register) -> None:
        registration = register(participant, paid_event)
        payment_service.reject_payment(registration)

        with pytest.raises(exceptions.InvalidStateError):
            payment_service.approve_payment(registration)
        with pytest.raises(exceptions.InvalidStateError):
            payment_service.reject_payment(registration)

        paid_event.refresh_from_db()
        assert paid_event.current_registrations == 0

    def test_free_registration_has_no_payment(self, event: Event, participant: FelicityUser, register: Register) -> None:
        registration = register(participant, event)

        with pytest.raises(exceptions.InvalidStateError):
            payment_service.approve_payment(registration)

    def test_provisional_ticket_is_replaced_on_approval(
        self, paid_event: Event, participant: FelicityUser, register: Register
    ) -> None:
        registration = register(participant, paid_event)
        Registration.objects.filter(pk=registration.pk).update(ticket_id="TKT-0000BEEF")

        approved = payment_service.approve_payment(registration)

        assert approved.ticket_id and approved.ticket_id.startswith(ticket_issuer.TICKET_PREFIX)


class TestMerchandise:
    def test_last_unit_goes_to_first_approval(
        self,
        t_shirt: MerchandiseItem,
        participant: FelicityUser,
        non_iiit_participant: FelicityUser,
        register: Register,
        django_capture_on_commit_callbacks: t.Any,
    ) -> None:
        selection = [{"item_id": t_shirt.pk, "quantity": 1, "variant": "L"}]
        first = register(participant, t_shirt.event, merchandise=selection)
        second = register(non_iiit_participant, t_shirt.event, merchandise=selection)

        with django_capture_on_commit_callbacks(execute=True):
            payment_service.approve_payment(first)
        with pytest.raises(exceptions.InsufficientStockError):
            payment_service.approve_payment(second)

        t_shirt.refresh_from_db()
        assert t_shirt.stock_quantity == 0
        second.refresh_from_db()
        assert second.status == Registration.Status.PENDING
        assert second.payment_status == Registration.PaymentStatus.PENDING
        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject.startswith("Order Confirmed")
        assert "Fest T-Shirt" in mail.outbox[0].body

    def test_cancel_after_approval_keeps_stock_taken(
        self, t_shirt: MerchandiseItem, participant: FelicityUser, register: Register
    ) -> None:
        registration = register(participant, t_shirt.event, merchandise=[{"item_id": t_shirt.pk}])
        payment_service.approve_payment(registration)

        registration_service.cancel_registration(registration.pk, participant)

        t_shirt.refresh_from_db()
        assert t_shirt.stock_quantity == 0

    def test_merchandise_total_includes_fee(
        self, make_event: t.Callable[..., Event], participant: FelicityUser, register: Register
    ) -> None:
        event = make_event(event_type=Event.EventType.MERCHANDISE, registration_fee=Decimal("50"))
        mug = MerchandiseItem.objects.create(event=event, name="Mug", price=Decimal("120"), stock_quantity=5)

        registration = register(participant, event, merchandise=[{"item_id": mug.pk}])

        assert registration.merchandise_total == Decimal("120")
        assert registration.payment_amount == Decimal("170")

    def test_free_merchandise_still_waits_for_approval(
        self,
        make_event: t.Callable[..., Event],
        participant: FelicityUser,
        non_iiit_participant: FelicityUser,
        register: Register,
    ) -> None:
        event = make_event(event_type=Event.EventType.MERCHANDISE)
        sticker = MerchandiseItem.objects.create(event=event, name="Sticker", price=Decimal("0"), stock_quantity=1)
        first = register(participant, event, merchandise=[{"item_id": sticker.pk}])
        second = register(non_iiit_participant, event, merchandise=[{"item_id": sticker.pk}])

        assert (first.status, first.payment_required, first.payment_amount) == (
            Registration.Status.PENDING,
            True,
            Decimal("0"),
        )
        assert second.status == Registration.Status.PENDING

        payment_service.approve_payment(first)
        with pytest.raises(exceptions.InsufficientStockError):
            payment_service.approve_payment(second)

        sticker.refresh_from_db()
        assert sticker.stock_quantity == 0
