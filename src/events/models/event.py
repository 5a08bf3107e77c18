import typing as t
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from accounts.models import FelicityUser


class EventQuerySet(models.QuerySet["Event"]):
    def published(self) -> t.Self:
        """Events that are visible to participants."""
        return self.filter(status=Event.EventStatus.PUBLISHED)

    def owned_by(self, organizer: "FelicityUser") -> t.Self:
        """Events created by the given organizer."""
        return self.filter(organizer=organizer)

    def with_organizer(self) -> t.Self:
        """Select the organizer as well."""
        return self.select_related("organizer")


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset for events."""
        return EventQuerySet(self.model, using=self._db)

    def published(self) -> EventQuerySet:
        """Events that are visible to participants."""
        return self.get_queryset().published()

    def owned_by(self, organizer: "FelicityUser") -> EventQuerySet:
        """Events created by the given organizer."""
        return self.get_queryset().owned_by(organizer)

    def with_organizer(self) -> EventQuerySet:
        """Select the organizer as well."""
        return self.get_queryset().with_organizer()


class Event(TimeStampedModel):
    class EventType(models.TextChoices):
        NORMAL = "normal", "Normal"
        MERCHANDISE = "merchandise", "Merchandise"

    class EventStatus(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ONGOING = "ongoing", "Ongoing"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    class Eligibility(models.TextChoices):
        ALL = "all", "All"
        IIIT_ONLY = "iiit_only", "IIIT Only"
        NON_IIIT_ONLY = "non_iiit_only", "Non-IIIT Only"

    organizer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events")
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    event_type = models.CharField(choices=EventType.choices, max_length=20, default=EventType.NORMAL)
    status = models.CharField(choices=EventStatus.choices, max_length=20, default=EventStatus.DRAFT, db_index=True)
    eligibility = models.CharField(choices=Eligibility.choices, max_length=20, default=Eligibility.ALL)
    tags = models.JSONField(default=list, blank=True)

    event_start_date = models.DateTimeField(db_index=True)
    event_end_date = models.DateTimeField()
    registration_deadline = models.DateTimeField()

    registration_limit = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    current_registrations = models.PositiveIntegerField(default=0, editable=False)
    registration_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0"), validators=[MinValueValidator(Decimal("0"))]
    )

    is_team_event = models.BooleanField(default=False)
    team_size_min = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    team_size_max = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])

    custom_form_fields = models.JSONField(
        default=list, blank=True, help_text="Organizer-defined registration form fields."
    )

    objects = EventManager()

    class Meta:
        ordering = ["event_start_date"]
        indexes = [
            models.Index(fields=["organizer", "status"], name="idx_event_organizer_status"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_registrations__lte=models.F("registration_limit")),
                name="event_registrations_within_limit",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        """Validate the time window and team size bounds."""
        super().clean()
        errors: dict[str, str] = {}
        if self.event_start_date and self.event_end_date and self.event_end_date <= self.event_start_date:
            errors["event_end_date"] = "End date must be after start date."
        if (
            self.registration_deadline
            and self.event_start_date
            and self.registration_deadline > self.event_start_date
        ):
            errors["registration_deadline"] = "Registration deadline must be before the event starts."
        if self.is_team_event:
            if not self.team_size_min or not self.team_size_max:
                errors["team_size_min"] = "Team events need a minimum and maximum team size."
            elif self.team_size_min > self.team_size_max:
                errors["team_size_max"] = "Maximum team size must not be less than the minimum."
        if errors:
            raise DjangoValidationError(errors)

    @property
    def is_merchandise(self) -> bool:
        """True for merchandise events."""
        return self.event_type == self.EventType.MERCHANDISE

    @property
    def available_slots(self) -> int:
        """Slots left before the registration limit is reached."""
        return max(self.registration_limit - self.current_registrations, 0)

    def has_available_slots(self, requested: int = 1) -> bool:
        """Whether the in-memory counter leaves room for ``requested`` more registrations."""
        return self.current_registrations + requested <= self.registration_limit

    def is_accepting_registrations(self) -> bool:
        """Published and before the registration deadline."""
        return self.status == self.EventStatus.PUBLISHED and timezone.now() < self.registration_deadline

    def is_registration_open(self) -> bool:
        """Published, before the deadline and with at least one free slot."""
        return self.is_accepting_registrations() and self.has_available_slots()

    def is_eligible(self, user: "FelicityUser") -> bool:
        """Check the participant type against the event eligibility."""
        from accounts.models import FelicityUser

        if self.eligibility == self.Eligibility.IIIT_ONLY:
            return user.participant_type == FelicityUser.ParticipantType.IIIT
        if self.eligibility == self.Eligibility.NON_IIIT_ONLY:
            return user.participant_type == FelicityUser.ParticipantType.NON_IIIT
        return True

    def required_form_fields(self) -> list[dict[str, t.Any]]:
        """Custom form fields the participant has to fill in."""
        return [field for field in self.custom_form_fields or [] if field.get("required")]
