"""Order status state machine.

TRANSITIONS is the only place legal status changes are defined; every
status-mutating operation in the order service calls ensure_transition.
"""

from enum import Enum

from common.errors import ValidationError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    PAID = "paid"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]


TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAYMENT_PENDING, OrderStatus.CANCELLED}),
    OrderStatus.PAYMENT_PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

INITIAL_STATUS = OrderStatus.PENDING


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    return requested in TRANSITIONS[current]


def ensure_transition(current: OrderStatus, requested: OrderStatus) -> OrderStatus:
    """Return the requested status if the move is legal.

    Raises:
        ValidationError: Naming both statuses when the move is not in TRANSITIONS.
    """
    if not can_transition(current, requested):
        raise ValidationError(f"Cannot transition order from {current.value} to {requested.value}")
    return requested
