import re
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class FelicityUserQueryset(models.QuerySet["FelicityUser"]):
    """Queryset for FelicityUser."""

    def participants(self) -> "FelicityUserQueryset":
        """Only participant accounts."""
        return self.filter(role=FelicityUser.Role.PARTICIPANT)

    def organizers(self) -> "FelicityUserQueryset":
        """Only organizer accounts."""
        return self.filter(role=FelicityUser.Role.ORGANIZER)


class FelicityUserManager(UserManager["FelicityUser"]):
    def get_queryset(self) -> FelicityUserQueryset:
        """Get queryset for FelicityUser."""
        return FelicityUserQueryset(self.model, using=self._db)

    def participants(self) -> FelicityUserQueryset:
        """Only participant accounts."""
        return self.get_queryset().participants()

    def organizers(self) -> FelicityUserQueryset:
        """Only organizer accounts."""
        return self.get_queryset().organizers()


class FelicityUser(AbstractUser):
    class Role(models.TextChoices):
        PARTICIPANT = "participant", "Participant"
        ORGANIZER = "organizer", "Organizer"
        ADMIN = "admin", "Admin"

    class ParticipantType(models.TextChoices):
        IIIT = "iiit", "IIIT"
        NON_IIIT = "non_iiit", "Non-IIIT"

    class OrganizerCategory(models.TextChoices):
        CLUB = "club", "Club"
        COUNCIL = "council", "Council"
        FEST_TEAM = "fest_team", "Fest Team"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PARTICIPANT, db_index=True)
    participant_type = models.CharField(max_length=20, choices=ParticipantType.choices, null=True, blank=True)
    college = models.CharField(max_length=255, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)

    # organizer profile
    organizer_name = models.CharField(max_length=255, blank=True, db_index=True)
    category = models.CharField(max_length=20, choices=OrganizerCategory.choices, null=True, blank=True)
    description = models.TextField(blank=True)
    contact_email = models.EmailField(blank=True)

    objects = FelicityUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def is_participant(self) -> bool:
        """True for participant accounts."""
        return self.role == self.Role.PARTICIPANT

    @property
    def is_organizer(self) -> bool:
        """True for organizer accounts."""
        return self.role == self.Role.ORGANIZER

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the organizer name or full name, falling back to the username."""
        if self.is_organizer and self.organizer_name:
            return self.organizer_name
        return self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
