from django.urls import path

from orders.handlers import (
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

urlpatterns = [
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/cancel", OrderCancelView.as_view(), name="order-cancel"),
    path("orders/<str:order_id>/payment", OrderPaymentView.as_view(), name="order-payment"),
    path("orders/<str:order_id>/fulfill", OrderFulfillView.as_view(), name="order-fulfill"),
    path("orders/<str:order_id>/refund", OrderRefundView.as_view(), name="order-refund"),
    path("admin/orders", OrderSearchView.as_view(), name="admin-order-search"),
    path("admin/orders/stats", OrderStatsView.as_view(), name="admin-order-stats"),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
]
