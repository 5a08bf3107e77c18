from .event import Event
from .merchandise import MerchandiseItem
from .registration import MerchandiseOrderLine, Registration, TeamMember

__all__ = [
    "Event",
    "MerchandiseItem",
    "MerchandiseOrderLine",
    "Registration",
    "TeamMember",
]
