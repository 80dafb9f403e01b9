"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from catalog.domain import CatalogItem, CatalogItemId, ItemType


class CatalogStore(ABC):
    """Interface for catalog reads and the counters the order core maintains."""

    @abstractmethod
    def get_item(self, item_type: ItemType, item_id: CatalogItemId) -> CatalogItem | None:
        """Return a catalog item, or None if it does not exist or is soft-deleted."""
        ...

    @abstractmethod
    def get_item_for_update(self, item_type: ItemType, item_id: CatalogItemId) -> CatalogItem | None:
        """Like get_item, but locks the row until the surrounding transaction ends."""
        ...

    @abstractmethod
    def reserve_seats(self, event_id: CatalogItemId, seats: int) -> bool:
        """Claim seats on an event in one conditional write.

        Returns False, without writing, if fewer than `seats` seats remain.
        """
        ...

    @abstractmethod
    def release_seats(self, event_id: CatalogItemId, seats: int) -> None:
        """Give seats back to an event, never going below zero."""
        ...

    @abstractmethod
    def adjust_enrollment_count(self, course_id: CatalogItemId, delta: int) -> None:
        """Add delta to a course's enrollment counter, floored at zero."""
        ...

    @abstractmethod
    def adjust_download_count(self, product_id: CatalogItemId, delta: int) -> None:
        """Add delta to a product's download counter, floored at zero."""
        ...
