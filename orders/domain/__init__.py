from orders.domain.models import Booking, NewOrderLine, Order, OrderItem, OrderPage, OrderStats, TopItem
from orders.domain.state_machine import TRANSITIONS, OrderStatus, can_transition, ensure_transition
from orders.domain.value_objects import OrderId

__all__ = [
    "Order",
    "OrderItem",
    "OrderPage",
    "OrderStats",
    "TopItem",
    "NewOrderLine",
    "Booking",
    "OrderId",
    "OrderStatus",
    "TRANSITIONS",
    "can_transition",
    "ensure_transition",
]
