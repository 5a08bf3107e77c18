"""Errors raised by the registration lifecycle.

Every error carries an ``ErrorKind`` which the API layer maps to a status code and
a ``{"kind": ..., "detail": ...}`` body.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    DEPENDENT_OPERATION_FAILURE = "dependent_operation_failure"


class RegistrationError(Exception):
    """Base class for registration lifecycle errors."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_detail = "The request could not be processed."

    def __init__(self, detail: str | None = None) -> None:
        """Store the human readable detail."""
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# validation


class RegistrationValidationError(RegistrationError):
    kind = ErrorKind.VALIDATION
    default_detail = "Invalid registration data."


class MissingFormFieldError(RegistrationValidationError):
    """Raised when an organizer-defined required form field is absent."""

    def __init__(self, label: str) -> None:
        """Name the missing field."""
        self.label = label
        super().__init__(f"{label} is required.")


class InvalidTeamSizeError(RegistrationValidationError):
    default_detail = "Team size is outside the range allowed for this event."


class InvalidMerchandiseSelectionError(RegistrationValidationError):
    default_detail = "Invalid merchandise selection."


# conflict


class RegistrationConflictError(RegistrationError):
    kind = ErrorKind.CONFLICT
    default_detail = "The registration conflicts with the current state."


class AlreadyRegisteredError(RegistrationConflictError):
    default_detail = "You are already registered for this event."


class RegistrationClosedError(RegistrationConflictError):
    default_detail = "Registration is closed for this event."


class CapacityExhaustedError(RegistrationConflictError):
    default_detail = "Event is full."


class TeamFullError(RegistrationConflictError):
    default_detail = "Team is already full."


class InsufficientStockError(RegistrationConflictError):
    """Raised when a merchandise item does not have enough stock left."""

    def __init__(self, item_name: str, available: int) -> None:
        """Name the item and how many are left."""
        self.item_name = item_name
        self.available = available
        super().__init__(f"Insufficient stock for {item_name}. Only {available} left.")


class InvalidStateError(RegistrationConflictError):
    default_detail = "This action is not allowed in the current state."


class AttendanceAlreadyMarkedError(RegistrationConflictError):
    default_detail = "Attendance already marked."


# not found


class RegistrationNotFoundError(RegistrationError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "Registration not found."


class EventNotFoundError(RegistrationError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "Event not found."


class InvalidInviteCodeError(RegistrationError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "Invalid invite code."


# authorization


class RegistrationPermissionError(RegistrationError):
    kind = ErrorKind.AUTHORIZATION
    default_detail = "You are not allowed to perform this action."


class NotEligibleError(RegistrationPermissionError):
    default_detail = "You are not eligible for this event."


class WrongRoleError(RegistrationPermissionError):
    default_detail = "Only participants can register for events."


# dependent operation


class TicketCodeGenerationError(RegistrationError):
    """The scannable code for a ticket could not be rendered."""

    kind = ErrorKind.DEPENDENT_OPERATION_FAILURE
    default_detail = "Failed to generate the ticket code."
