"""Order service - converts carts into durable, paid, fulfilled purchases.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants inside one transaction per operation
- Route every status change through the state machine
- Return domain models or raise domain errors

Event capacity is decided by a single conditional write on the event row
(CatalogStore.reserve_seats) inside the create_order transaction. Seats stay
reserved while the order is live and are released on cancellation or refund,
so confirmed bookings can never outnumber an event's capacity.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from uuid import UUID

from django.db import DatabaseError
from django.dispatch import Signal
from django.utils import timezone

from cart.domain import CartItem
from catalog.domain import Event, ItemType
from catalog.services.availability import FULLY_BOOKED, describe_unavailable, evaluate, parse_item_type
from catalog.stores.interfaces import CatalogStore
from common.errors import ConflictError, ForbiddenError, InfrastructureError, NotFoundError, ValidationError
from common.pricing import TaxPolicy, compute_totals
from orders.domain import (
    Booking,
    NewOrderLine,
    Order,
    OrderId,
    OrderItem,
    OrderPage,
    OrderStats,
    OrderStatus,
    ensure_transition,
)
from orders.signals import order_created, order_fulfilled, order_refunded
from orders.stores.interfaces import OrderStore

logger = logging.getLogger(__name__)

CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.PAYMENT_PENDING})
FULFILLABLE = frozenset({OrderStatus.PAID, OrderStatus.PROCESSING})
# Statuses whose orders still hold event seats.
SEAT_HOLDING = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PAYMENT_PENDING,
        OrderStatus.PAID,
        OrderStatus.PROCESSING,
    }
)
BOOKING_STATUSES = frozenset({"confirmed", "cancelled"})


def claim_key(item) -> tuple[str, str]:
    """Global lock order for catalog rows: by item type, then id."""
    return item.item_type.value, str(item.item_id)


def parse_order_id(value: OrderId | str) -> OrderId:
    if isinstance(value, OrderId):
        return value
    try:
        return OrderId.from_string(value)
    except (TypeError, ValueError):
        raise NotFoundError("Order") from None


def parse_status(value: OrderStatus | str) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown order status: {value}") from None


class OrderService:
    """Service for order creation, payment linkage, fulfillment and refunds."""

    def __init__(
        self,
        store: OrderStore,
        catalog: CatalogStore,
        tax_policy: TaxPolicy,
        clock: Callable[[], datetime] = timezone.now,
        max_page_limit: int = 100,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._tax_policy = tax_policy
        self._clock = clock
        self._max_page_limit = max_page_limit

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        """Run a block in one transaction; database failures surface as InfrastructureError."""
        try:
            with self._store.atomic():
                yield
        except DatabaseError as exc:
            logger.exception("Database failure during %s", action)
            raise InfrastructureError() from exc

    def _notify(self, signal: Signal, order: Order) -> None:
        for receiver, response in signal.send_robust(sender=self.__class__, order=order):
            if isinstance(response, Exception):
                logger.error(
                    "Receiver %r failed for order %s",
                    receiver,
                    order.id,
                    exc_info=response,
                )

    def _locked(self, order_id: OrderId) -> Order:
        order = self._store.get_order_for_update(order_id)
        if order is None:
            raise NotFoundError("Order")
        return order

    def _transition(self, order: Order, status: OrderStatus, completed_at: datetime | None = None) -> None:
        ensure_transition(order.status, status)
        self._store.set_status(order.id, status, completed_at=completed_at)

    def _check_paging(self, page: int, limit: int) -> None:
        if page < 1:
            raise ValidationError("Page must be at least 1")
        if not 1 <= limit <= self._max_page_limit:
            raise ValidationError(f"Limit must be between 1 and {self._max_page_limit}")

    # Creation

    def _claim(self, item: CartItem, now: datetime) -> NewOrderLine:
        """Re-validate one cart line against the locked catalog row and reserve seats."""
        catalog_item = self._catalog.get_item_for_update(item.item_type, item.item_id)
        reason = evaluate(catalog_item, now)
        if reason is not None:
            raise ValidationError(describe_unavailable(item.item_type, item.title, reason))
        if isinstance(catalog_item, Event) and not self._catalog.reserve_seats(catalog_item.id, item.quantity):
            raise ValidationError(describe_unavailable(item.item_type, item.title, FULLY_BOOKED))
        return NewOrderLine(
            item_type=item.item_type,
            item_id=item.item_id,
            title=catalog_item.title,
            unit_price=catalog_item.price,
            quantity=item.quantity,
        )

    def create_order(self, user_id: int, cart_items: Sequence[CartItem]) -> Order:
        """Turn cart lines into a pending order, re-priced at current catalog prices.

        Raises:
            ValidationError: If the cart is empty or any item is no longer purchasable.
            NotFoundError: If the user does not exist.
        """
        if not cart_items:
            raise ValidationError("Cart is empty")

        with self._transaction("create_order"):
            if not self._store.user_exists(user_id):
                raise NotFoundError("User")
            now = self._clock()
            # Rows are locked in one global order so concurrent checkouts cannot deadlock.
            lock_order = sorted(range(len(cart_items)), key=lambda i: claim_key(cart_items[i]))
            claimed = {i: self._claim(cart_items[i], now) for i in lock_order}
            lines = [claimed[i] for i in range(len(cart_items))]
            totals = compute_totals(lines, self._tax_policy)
            order = self._store.insert_order(user_id, totals, lines)

        logger.info("Created order %s for user %s (total=%d)", order.id, user_id, order.total)
        self._notify(order_created, order)
        return order

    # Payment

    def attach_payment_reference(
        self,
        order_id: OrderId | str,
        payment_reference: str,
        payment_method: str = "",
    ) -> Order:
        """Link an external payment to the order and move it to payment_pending.

        Raises:
            ConflictError: If the order already has a reference, or the reference is taken.
        """
        order_id = parse_order_id(order_id)
        if not payment_reference:
            raise ValidationError("Payment reference is required")

        with self._transaction("attach_payment_reference"):
            order = self._locked(order_id)
            if order.payment_reference:
                raise ConflictError("Order already has a payment reference attached")
            ensure_transition(order.status, OrderStatus.PAYMENT_PENDING)
            self._store.set_payment_reference(
                order_id, payment_reference, payment_method, OrderStatus.PAYMENT_PENDING
            )

        logger.info("Attached payment reference to order %s", order_id)
        return self._store.get_order(order_id)

    def mark_paid(self, order_id: OrderId | str) -> Order:
        order_id = parse_order_id(order_id)
        with self._transaction("mark_paid"):
            self._transition(self._locked(order_id), OrderStatus.PAID)
        return self._store.get_order(order_id)

    def confirm_payment(self, payment_reference: str) -> Order:
        """Handle an external payment confirmation; safe to call more than once."""
        order = self._store.find_by_payment_reference(payment_reference)
        if order is None:
            raise NotFoundError("Order")

        with self._transaction("confirm_payment"):
            locked = self._locked(order.id)
            if locked.status is OrderStatus.PAYMENT_PENDING:
                self._transition(locked, OrderStatus.PAID)
        return self.fulfill_order(order.id)

    # Fulfillment

    def _fulfill_item(self, order: Order, item: OrderItem) -> None:
        if item.item_type is ItemType.COURSE:
            if self._store.grant_enrollment(order.user_id, item.item_id, item.id):
                self._catalog.adjust_enrollment_count(item.item_id, 1)
        elif item.item_type is ItemType.EVENT:
            self._store.create_booking(order.user_id, item.item_id, order.id, item.id, item.quantity)
        elif item.item_type is ItemType.DIGITAL_PRODUCT:
            if self._store.grant_download(order.user_id, item.item_id, item.id):
                self._catalog.adjust_download_count(item.item_id, 1)

    def fulfill_order(self, order_id: OrderId | str) -> Order:
        """Grant access for every item of a paid order and complete it.

        A completed order is returned unchanged, so redelivered payment
        confirmations never grant anything twice.

        Raises:
            NotFoundError: If the order does not exist.
            ValidationError: If the order has not been paid.
        """
        order_id = parse_order_id(order_id)

        with self._transaction("fulfill_order"):
            order = self._locked(order_id)
            if order.status is OrderStatus.COMPLETED:
                logger.info("Order %s already fulfilled", order_id)
                return order
            if order.status not in FULFILLABLE:
                raise ValidationError("Order must be paid before fulfillment")

            if order.status is OrderStatus.PAID:
                self._transition(order, OrderStatus.PROCESSING)
                order = self._locked(order_id)
            for item in sorted(order.items, key=claim_key):
                self._fulfill_item(order, item)
            self._transition(order, OrderStatus.COMPLETED, completed_at=self._clock())

        fulfilled = self._store.get_order(order_id)
        logger.info("Fulfilled order %s", order_id)
        self._notify(order_fulfilled, fulfilled)
        return fulfilled

    # Cancellation and refunds

    def _release_seats(self, order: Order) -> None:
        for item in sorted(order.items, key=claim_key):
            if item.item_type is ItemType.EVENT:
                self._catalog.release_seats(item.item_id, item.quantity)

    def _cancel(self, order: Order) -> None:
        ensure_transition(order.status, OrderStatus.CANCELLED)
        if order.status in SEAT_HOLDING:
            self._release_seats(order)
        self._store.set_status(order.id, OrderStatus.CANCELLED)

    def cancel_order(self, order_id: OrderId | str) -> Order:
        """Cancel an order that has not been paid yet.

        Raises:
            ValidationError: If the order is past payment_pending.
        """
        order_id = parse_order_id(order_id)
        with self._transaction("cancel_order"):
            order = self._locked(order_id)
            if order.status not in CANCELLABLE:
                raise ValidationError(f"Cannot cancel order in status {order.status.value}")
            self._cancel(order)

        logger.info("Cancelled order %s", order_id)
        return self._store.get_order(order_id)

    def _refund_item(self, order: Order, item: OrderItem) -> None:
        if item.item_type is ItemType.COURSE:
            if self._store.revoke_enrollment(order.user_id, item.item_id, item.id):
                self._catalog.adjust_enrollment_count(item.item_id, -1)
        elif item.item_type is ItemType.EVENT:
            if self._store.cancel_booking(item.id):
                self._catalog.release_seats(item.item_id, item.quantity)
        elif item.item_type is ItemType.DIGITAL_PRODUCT:
            if self._store.revoke_download(item.id):
                self._catalog.adjust_download_count(item.item_id, -1)

    def refund_order(self, order_id: OrderId | str) -> Order:
        """Reverse every fulfillment side effect of a completed order.

        Raises:
            ValidationError: If the order is not completed.
        """
        order_id = parse_order_id(order_id)
        with self._transaction("refund_order"):
            order = self._locked(order_id)
            if order.status is not OrderStatus.COMPLETED:
                raise ValidationError(f"Only completed orders can be refunded (current status: {order.status.value})")
            for item in sorted(order.items, key=claim_key):
                self._refund_item(order, item)
            self._transition(order, OrderStatus.REFUNDED)

        refunded = self._store.get_order(order_id)
        logger.info("Refunded order %s", order_id)
        self._notify(order_refunded, refunded)
        return refunded

    def update_status(self, order_id: OrderId | str, status: OrderStatus | str) -> Order:
        """Move an order to any status the state machine allows.

        Completion and refunds run their side effects; cancellation releases
        held seats.
        """
        order_id = parse_order_id(order_id)
        status = parse_status(status)
        if status is OrderStatus.COMPLETED:
            return self.fulfill_order(order_id)
        if status is OrderStatus.REFUNDED:
            return self.refund_order(order_id)

        with self._transaction("update_status"):
            order = self._locked(order_id)
            if status is OrderStatus.CANCELLED:
                self._cancel(order)
            else:
                self._transition(order, status)

        logger.info("Order %s moved to %s", order_id, status.value)
        return self._store.get_order(order_id)

    # Queries

    def get_order(self, order_id: OrderId | str, user_id: int | None = None) -> Order:
        """Return an order; when user_id is given, only its owner or staff may see it."""
        order = self._store.get_order(parse_order_id(order_id))
        if order is None:
            raise NotFoundError("Order")
        if user_id is not None and order.user_id != user_id and not self._store.is_staff(user_id):
            raise ForbiddenError()
        return order

    def list_user_orders(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 20,
        status: OrderStatus | str | None = None,
    ) -> OrderPage:
        self._check_paging(page, limit)
        status = parse_status(status) if status is not None else None
        orders, total = self._store.list_user_orders(user_id, (page - 1) * limit, limit, status)
        return OrderPage(orders=tuple(orders), total=total, page=page, limit=limit)

    def search_orders(
        self,
        query: str = "",
        status: OrderStatus | str | None = None,
        item_type: ItemType | str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> OrderPage:
        """Staff search across all orders by id or buyer email, status, item type and creation date."""
        self._check_paging(page, limit)
        if created_from is not None and created_to is not None and created_from > created_to:
            raise ValidationError("Start date must not be after end date")
        status = parse_status(status) if status is not None else None
        item_type = parse_item_type(item_type) if item_type is not None else None
        orders, total = self._store.search_orders(
            (page - 1) * limit,
            limit,
            query=query.strip(),
            status=status,
            item_type=item_type,
            created_from=created_from,
            created_to=created_to,
        )
        return OrderPage(orders=tuple(orders), total=total, page=page, limit=limit)

    def get_order_stats(self, created_from: datetime | None = None, created_to: datetime | None = None) -> OrderStats:
        return self._store.order_stats(created_from, created_to)

    # Bookings

    def list_user_bookings(self, user_id: int, status: str | None = None) -> list[Booking]:
        if status is not None and status not in BOOKING_STATUSES:
            raise ValidationError(f"Unknown booking status: {status}")
        return self._store.list_user_bookings(user_id, status)

    def get_booking(self, booking_id: UUID | str, user_id: int | None = None) -> Booking:
        """Return a booking; when user_id is given, only its owner or staff may see it."""
        try:
            booking_id = booking_id if isinstance(booking_id, UUID) else UUID(booking_id)
        except (TypeError, ValueError):
            raise NotFoundError("Booking") from None
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking")
        if user_id is not None and booking.user_id != user_id and not self._store.is_staff(user_id):
            raise ForbiddenError()
        return booking
