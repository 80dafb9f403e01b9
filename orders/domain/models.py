"""Domain models representing persisted order state.

These are pure domain objects with no API input rules.
Django ORM models are in orders/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from catalog.domain import CatalogItemId, ItemType
from common.pricing import Money
from orders.domain.state_machine import OrderStatus
from orders.domain.value_objects import OrderId


@dataclass(frozen=True)
class OrderItem:
    """Frozen snapshot of one purchased line."""

    id: str
    item_type: ItemType
    item_id: CatalogItemId
    title: str
    unit_price: Money
    quantity: int

    @property
    def line_subtotal(self) -> int:
        return self.unit_price.amount * self.quantity


@dataclass(frozen=True)
class Order:
    """Domain representation of an Order with its items."""

    id: OrderId
    user_id: int
    status: OrderStatus
    subtotal: int
    tax: int
    total: int
    payment_reference: str | None
    payment_method: str
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None
    items: tuple[OrderItem, ...] = ()


@dataclass(frozen=True)
class Booking:
    """Domain representation of an event Booking."""

    id: str
    user_id: int
    event_id: CatalogItemId
    order_id: OrderId
    status: str
    attendees: int
    created_at: datetime
    event_title: str = ""
    event_starts_at: datetime | None = None
    venue_name: str = ""


@dataclass(frozen=True)
class OrderPage:
    orders: tuple[Order, ...]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass(frozen=True)
class NewOrderLine:
    """A re-priced line about to be written as an OrderItem."""

    item_type: ItemType
    item_id: CatalogItemId
    title: str
    unit_price: Money
    quantity: int


@dataclass(frozen=True)
class TopItem:
    item_type: ItemType
    item_id: CatalogItemId
    title: str
    total_quantity: int
    total_revenue: int


@dataclass(frozen=True)
class OrderStats:
    """Sales figures over completed orders, plus a count of every order by status."""

    total_revenue: int
    order_count: int
    orders_by_status: dict[str, int]
    top_items: tuple[TopItem, ...] = ()

    @property
    def average_order_value(self) -> int:
        return round(self.total_revenue / self.order_count) if self.order_count else 0
