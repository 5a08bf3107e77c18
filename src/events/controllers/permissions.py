import typing as t

from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.exceptions import PermissionDenied
from ninja_extra.permissions import BasePermission

from accounts.models import FelicityUser
from events import models


class IsParticipant(BasePermission):
    message = "Only participants can register for events."

    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Participants only."""
        return t.cast(FelicityUser, request.user).is_participant


class IsOrganizer(BasePermission):
    message = "Only organizers can manage events."

    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Organizers and site admins."""
        user = t.cast(FelicityUser, request.user)
        return user.is_organizer or user.is_staff


class EventOwnerPermission(BasePermission):
    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Must implement abstract method. This is due to an error in Ninja Extra.

        This Method will be ignored, only has_object_permission will be called.
        """
        return True

    def has_object_permission(
        self,
        request: HttpRequest,
        controller: ControllerBase,
        obj: models.Event,
    ) -> bool:
        """Only the organizer who created the event may manage it."""
        if obj.organizer_id == request.user.id or request.user.is_staff:
            return True
        raise PermissionDenied("You can only manage your own events.")
