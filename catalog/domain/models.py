"""Domain models representing persisted catalog state.

These are pure domain objects with no API input rules.
Django ORM models are in catalog/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from catalog.domain.value_objects import Capacity, CatalogItemId, ItemType
from common.pricing import Money


@dataclass(frozen=True)
class CatalogItem:
    """Domain representation of any purchasable entry."""

    id: CatalogItemId
    item_type: ItemType
    title: str
    price: Money
    is_published: bool
    deleted_at: datetime | None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class Course(CatalogItem):
    enrollment_count: int = 0


@dataclass(frozen=True)
class Event(CatalogItem):
    """Domain representation of an Event and its seat usage."""

    starts_at: datetime | None = None
    capacity: Capacity = Capacity(0)
    booked_count: int = 0

    @property
    def remaining(self) -> int:
        return max(self.capacity.value - self.booked_count, 0)


@dataclass(frozen=True)
class DigitalProduct(CatalogItem):
    download_limit: int = 3
    download_count: int = 0
