"""Per-item merchandise inventory."""

import typing as t
from collections import defaultdict
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import F

from events.exceptions import InsufficientStockError
from events.models import MerchandiseItem

logger = structlog.get_logger(__name__)


def check_availability(item: MerchandiseItem, quantity: int) -> bool:
    """Whether the live stock covers ``quantity``."""
    item.refresh_from_db(fields=["stock_quantity"])
    return item.stock_quantity >= quantity


def decrement(item: MerchandiseItem, quantity: int) -> None:
    """Take ``quantity`` units out of stock or raise ``InsufficientStockError``."""
    updated = MerchandiseItem.objects.filter(pk=item.pk, stock_quantity__gte=quantity).update(
        stock_quantity=F("stock_quantity") - quantity
    )
    if not updated:
        item.refresh_from_db(fields=["stock_quantity"])
        raise InsufficientStockError(item.name, item.stock_quantity)
    item.refresh_from_db(fields=["stock_quantity"])


@transaction.atomic
def reserve(lines: t.Iterable[tuple[UUID, int]]) -> list[MerchandiseItem]:
    """Decrement several items at once, all or nothing.

    Rows are locked in primary-key order so two concurrent reservations touching
    the same items cannot deadlock. Any shortfall raises before anything is written.
    """
    wanted: dict[UUID, int] = defaultdict(int)
    for item_id, quantity in lines:
        wanted[item_id] += quantity

    items = list(MerchandiseItem.objects.select_for_update().filter(pk__in=wanted.keys()).order_by("pk"))
    for item in items:
        if item.stock_quantity < wanted[item.pk]:
            logger.info(
                "merchandise_stock_shortfall",
                item_id=str(item.pk),
                requested=wanted[item.pk],
                available=item.stock_quantity,
            )
            raise InsufficientStockError(item.name, item.stock_quantity)

    for item in items:
        decrement(item, wanted[item.pk])
    return items
