from orders.handlers.views import (
    BookingDetailView,
    BookingListView,
    OrderCancelView,
    OrderDetailView,
    OrderFulfillView,
    OrderListView,
    OrderPaymentView,
    OrderRefundView,
    OrderSearchView,
    OrderStatsView,
)

__all__ = [
    "OrderListView",
    "OrderDetailView",
    "OrderCancelView",
    "OrderPaymentView",
    "OrderFulfillView",
    "OrderRefundView",
    "OrderSearchView",
    "OrderStatsView",
    "BookingListView",
    "BookingDetailView",
]
