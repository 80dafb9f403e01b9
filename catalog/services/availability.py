"""Availability checker - answers "can this item be bought right now, and for how much?"

The same rules are evaluated twice: advisorily by the cart, and inside the
order transaction against the locked row (see orders.services).
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from catalog.domain import CatalogItem, CatalogItemId, Event, ItemType
from catalog.stores.interfaces import CatalogStore
from common.errors import ValidationError
from common.pricing import Money

NOT_FOUND = "not found"
UNPUBLISHED = "unpublished"
ALREADY_STARTED = "already started"
FULLY_BOOKED = "fully booked"


@dataclass(frozen=True)
class Availability:
    available: bool
    reason: str | None = None
    current_price: Money | None = None
    title: str | None = None


def evaluate(item: CatalogItem | None, now: datetime) -> str | None:
    """Return the first failing rule for an item, or None if it is purchasable."""
    if item is None or item.is_deleted:
        return NOT_FOUND
    if not item.is_published:
        return UNPUBLISHED
    if isinstance(item, Event):
        if item.starts_at is None or item.starts_at <= now:
            return ALREADY_STARTED
        if item.booked_count >= item.capacity.value:
            return FULLY_BOOKED
    return None


def describe_unavailable(item_type: ItemType, title: str, reason: str) -> str:
    """Human-readable message for a failed availability rule."""
    label = item_type.label
    if reason == NOT_FOUND:
        return f'{label} "{title}" is no longer available'
    if reason == ALREADY_STARTED:
        return f'{label} "{title}" has already started'
    if reason == FULLY_BOOKED:
        return f'{label} "{title}" is fully booked'
    return f'{label} "{title}" is not currently available'


def parse_item_type(value: str) -> ItemType:
    try:
        return ItemType(value)
    except ValueError:
        raise ValidationError(f"Invalid item type: {value}") from None


def parse_item_id(value) -> CatalogItemId | None:
    """Return None for malformed ids; callers treat that as not found."""
    try:
        return CatalogItemId.from_string(value)
    except (TypeError, ValueError):
        return None


class AvailabilityChecker:
    """Read-only purchasability checks against the catalog."""

    def __init__(self, store: CatalogStore, clock: Callable[[], datetime] = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def check(self, item_type: ItemType | str, item_id: CatalogItemId | str) -> Availability:
        if not isinstance(item_type, ItemType):
            item_type = parse_item_type(item_type)
        if not isinstance(item_id, CatalogItemId):
            item_id = parse_item_id(item_id)
            if item_id is None:
                return Availability(available=False, reason=NOT_FOUND)

        item = self._store.get_item(item_type, item_id)
        reason = evaluate(item, self._clock())
        if item is None:
            return Availability(available=False, reason=reason)
        return Availability(
            available=reason is None,
            reason=reason,
            current_price=item.price,
            title=item.title,
        )
