"""Participant-facing event controllers."""

from .details import EventPublicDetailsController
from .registration import EventPublicRegistrationController

EVENT_PUBLIC_CONTROLLERS: list[type] = [
    EventPublicDetailsController,
    EventPublicRegistrationController,
]

__all__ = [
    "EventPublicDetailsController",
    "EventPublicRegistrationController",
    "EVENT_PUBLIC_CONTROLLERS",
]
