"""Organizer controllers package."""

from .core import EventAdminCoreController
from .registrations import EventAdminRegistrationsController

EVENT_ADMIN_CONTROLLERS: list[type] = [
    EventAdminCoreController,
    EventAdminRegistrationsController,
]

__all__ = [
    "EventAdminCoreController",
    "EventAdminRegistrationsController",
    "EVENT_ADMIN_CONTROLLERS",
]
