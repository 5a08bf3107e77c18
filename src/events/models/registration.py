import typing as t
from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Count, OuterRef, Q, Subquery
from django.db.models.functions import Coalesce

from common.models import TimeStampedModel

from .event import Event
from .merchandise import MerchandiseItem

if t.TYPE_CHECKING:
    from accounts.models import FelicityUser


class RegistrationQuerySet(models.QuerySet["Registration"]):
    def active(self) -> t.Self:
        """Registrations that still hold a seat."""
        return self.exclude(status=Registration.Status.CANCELLED)

    def for_user(self, user: "FelicityUser") -> t.Self:
        """Registrations where the user is the participant or a team member, voided memberships included."""
        return self.filter(
            Q(participant=user)
            | Q(
                team_members__user=user,
                team_members__status__in=[TeamMember.Status.ACCEPTED, TeamMember.Status.CANCELLED],
            )
        ).distinct()

    def with_team_size(self) -> t.Self:
        """Annotate the accepted member count read by ``Registration.team_size``."""
        accepted = (
            TeamMember.objects.filter(registration=OuterRef("pk"), status=TeamMember.Status.ACCEPTED)
            .order_by()
            .values("registration")
            .annotate(n=Count("pk"))
            .values("n")
        )
        return self.annotate(accepted_member_count=Coalesce(Subquery(accepted), 0))

    def full(self) -> t.Self:
        """Select and prefetch everything the API renders."""
        return self.with_team_size().select_related("event", "event__organizer", "participant").prefetch_related(
            "team_members", "merchandise_lines"
        )


class RegistrationManager(models.Manager["Registration"]):
    def get_queryset(self) -> RegistrationQuerySet:
        """Get base queryset for registrations."""
        return RegistrationQuerySet(self.model, using=self._db)

    def active(self) -> RegistrationQuerySet:
        """Registrations that still hold a seat."""
        return self.get_queryset().active()

    def for_user(self, user: "FelicityUser") -> RegistrationQuerySet:
        """Registrations visible to the user as leader or member."""
        return self.get_queryset().for_user(user)

    def full(self) -> RegistrationQuerySet:
        """Registrations with related data loaded."""
        return self.get_queryset().full()

    def with_team_size(self) -> RegistrationQuerySet:
        """Registrations with their accepted member count."""
        return self.get_queryset().with_team_size()


class Registration(TimeStampedModel):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"
        WAITLISTED = "waitlisted", "Waitlisted"  # reserved, never assigned

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"
        COMPLETED = "completed", "Completed"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    participant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    status = models.CharField(choices=Status.choices, max_length=20, default=Status.PENDING, db_index=True)
    form_responses = models.JSONField(default=dict, blank=True)

    # team
    is_team_registration = models.BooleanField(default=False)
    team_name = models.CharField(max_length=255, blank=True)
    target_team_size = models.PositiveSmallIntegerField(null=True, blank=True)
    invite_code = models.CharField(max_length=16, unique=True, null=True, blank=True)

    # payment
    payment_required = models.BooleanField(default=False)
    payment_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(Decimal("0"))]
    )
    payment_status = models.CharField(
        choices=PaymentStatus.choices, max_length=20, default=PaymentStatus.PENDING, db_index=True
    )
    payment_proof = models.CharField(max_length=512, blank=True, help_text="Reference returned by file storage.")
    transaction_id = models.CharField(max_length=255, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    merchandise_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))

    # ticket
    ticket_id = models.CharField(max_length=32, unique=True, null=True, blank=True)
    qr_code = models.TextField(blank=True, help_text="PNG data URL encoding the ticket id.")

    # attendance
    attendance_marked = models.BooleanField(default=False)
    attendance_marked_at = models.DateTimeField(null=True, blank=True)
    attendance_marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    objects = RegistrationManager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "participant"],
                condition=~Q(status="cancelled"),
                name="unique_active_registration_per_event",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="idx_registration_event_status"),
        ]

    def __str__(self) -> str:
        return f"{self.participant_id} -> {self.event_id} ({self.status})"

    @property
    def registered_at(self) -> datetime:
        """Alias kept for exports."""
        return self.created_at

    @property
    def team_size(self) -> int:
        """Leader plus accepted members."""
        if not self.is_team_registration:
            return 1
        if (annotated := getattr(self, "accepted_member_count", None)) is not None:
            return 1 + annotated
        return 1 + self.team_members.filter(status=TeamMember.Status.ACCEPTED).count()

    @property
    def is_team_complete(self) -> bool:
        """Accepted membership has reached the target size."""
        return not self.is_team_registration or self.team_size >= (self.target_team_size or 1)

    @property
    def is_payment_settled(self) -> bool:
        """No payment is owed, or it has been approved."""
        return not self.payment_required or self.payment_status in (
            self.PaymentStatus.APPROVED,
            self.PaymentStatus.COMPLETED,
        )

    def recipients(self) -> list[tuple[str, str]]:
        """Name and email of the leader followed by every accepted member."""
        people = [(self.participant.get_display_name(), self.participant.email)]
        if self.is_team_registration:
            people += [
                (member.name, member.email)
                for member in self.team_members.filter(status=TeamMember.Status.ACCEPTED).order_by("created_at")
            ]
        return people


class TeamMember(TimeStampedModel):
    class Status(models.TextChoices):
        INVITED = "invited", "Invited"
        ACCEPTED = "accepted", "Accepted"
        DECLINED = "declined", "Declined"
        CANCELLED = "cancelled", "Cancelled"

    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name="team_members")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="team_members")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="team_memberships")
    name = models.CharField(max_length=255)
    email = models.EmailField()
    status = models.CharField(choices=Status.choices, max_length=20, default=Status.ACCEPTED)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                condition=Q(status="accepted"),
                name="unique_accepted_team_member_per_event",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} in {self.registration.team_name}"

    def clean(self) -> None:
        """The denormalised event must match the owning registration."""
        super().clean()
        if self.registration_id and self.event_id and self.registration.event_id != self.event_id:
            raise DjangoValidationError({"event": "Team member event must match the team registration."})


class MerchandiseOrderLine(TimeStampedModel):
    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name="merchandise_lines")
    item = models.ForeignKey(MerchandiseItem, on_delete=models.PROTECT, related_name="order_lines")
    name = models.CharField(max_length=255)
    variant = models.CharField(max_length=255, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self) -> Decimal:
        """Price snapshot times quantity."""
        return self.price * self.quantity
