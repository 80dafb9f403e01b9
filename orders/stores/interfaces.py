"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from uuid import UUID

from catalog.domain import CatalogItemId, ItemType
from common.pricing import Totals
from orders.domain import Booking, NewOrderLine, Order, OrderId, OrderStats, OrderStatus


class OrderStore(ABC):
    """Interface for order persistence and fulfillment side effects."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager wrapping a database transaction."""
        ...

    @abstractmethod
    def user_exists(self, user_id: int) -> bool:
        """Check if an active user exists."""
        ...

    @abstractmethod
    def is_staff(self, user_id: int) -> bool:
        ...

    @abstractmethod
    def insert_order(self, user_id: int, totals: Totals, lines: list[NewOrderLine]) -> Order:
        """Write a pending order and its items; return the materialized order."""
        ...

    @abstractmethod
    def get_order(self, order_id: OrderId) -> Order | None:
        """Return an order with its items, or None if not found."""
        ...

    @abstractmethod
    def get_order_for_update(self, order_id: OrderId) -> Order | None:
        """Like get_order, but locks the order row until the transaction ends."""
        ...

    @abstractmethod
    def find_by_payment_reference(self, payment_reference: str) -> Order | None:
        ...

    @abstractmethod
    def list_user_orders(
        self,
        user_id: int,
        offset: int,
        limit: int,
        status: OrderStatus | None = None,
    ) -> tuple[list[Order], int]:
        """Return one page of a user's orders (newest first) and the total count."""
        ...

    @abstractmethod
    def search_orders(
        self,
        offset: int,
        limit: int,
        query: str = "",
        status: OrderStatus | None = None,
        item_type: ItemType | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> tuple[list[Order], int]:
        """Return one page of all orders matching the filters (newest first) and the total count.

        `query` matches part of the order id or the buyer's email.
        """
        ...

    @abstractmethod
    def order_stats(self, created_from: datetime | None = None, created_to: datetime | None = None) -> OrderStats:
        ...

    @abstractmethod
    def set_status(self, order_id: OrderId, status: OrderStatus, completed_at: datetime | None = None) -> None:
        """Write a status already approved by the state machine."""
        ...

    @abstractmethod
    def set_payment_reference(
        self,
        order_id: OrderId,
        payment_reference: str,
        payment_method: str,
        status: OrderStatus,
    ) -> None:
        """Store the payment reference and status together.

        Raises:
            ConflictError: If the reference is already used by another order.
        """
        ...

    @abstractmethod
    def grant_enrollment(self, user_id: int, course_id: CatalogItemId, order_item_id: str) -> bool:
        """Enroll the user unless already enrolled. Returns True if a row was created."""
        ...

    @abstractmethod
    def revoke_enrollment(self, user_id: int, course_id: CatalogItemId, order_item_id: str) -> bool:
        """Withdraw the enrollment held through this order item. Returns True if it was deleted.

        When another completed order still covers the course, the enrollment is
        moved onto that order item instead and False is returned.
        """
        ...

    @abstractmethod
    def create_booking(
        self,
        user_id: int,
        event_id: CatalogItemId,
        order_id: OrderId,
        order_item_id: str,
        attendees: int,
    ) -> bool:
        """Create a confirmed booking for the order item unless one exists."""
        ...

    @abstractmethod
    def cancel_booking(self, order_item_id: str) -> bool:
        """Cancel the confirmed booking for the order item. Returns True if one was cancelled."""
        ...

    @abstractmethod
    def list_user_bookings(self, user_id: int, status: str | None = None) -> list[Booking]:
        """Return a user's bookings with event details, soonest event first."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: UUID) -> Booking | None:
        ...

    @abstractmethod
    def grant_download(self, user_id: int, product_id: CatalogItemId, order_item_id: str) -> bool:
        """Record a download grant for the order item unless one exists."""
        ...

    @abstractmethod
    def revoke_download(self, order_item_id: str) -> bool:
        """Revoke the active grant for the order item. Returns True if one was revoked."""
        ...
