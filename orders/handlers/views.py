"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Never contain business logic

Domain errors are mapped to responses by common.exception_handler.
"""

from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.services import get_cart_service
from cart.session import cart_key_for
from common.errors import ValidationError
from orders.handlers.serializers import (
    BookingListQuerySerializer,
    BookingSerializer,
    DateRangeQuerySerializer,
    OrderListQuerySerializer,
    OrderPageSerializer,
    OrderSearchQuerySerializer,
    OrderSerializer,
    OrderStatsSerializer,
    PaymentReferenceSerializer,
)
from orders.services import get_order_service


class OrderListView(APIView):
    """Handler for GET /api/orders (list) and POST /api/orders (checkout)."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        query = OrderListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = get_order_service().list_user_orders(request.user.pk, **query.validated_data)
        return Response(OrderPageSerializer(page).data)

    def post(self, request: Request) -> Response:
        cart_service = get_cart_service()
        user_key = cart_key_for(request)
        problems = cart_service.validate_cart(user_key)
        if problems:
            raise ValidationError("; ".join(problems))
        cart = cart_service.get_cart(user_key)
        order = get_order_service().create_order(request.user.pk, cart.items)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Handler for GET /api/orders/{order_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, order_id: str) -> Response:
        order = get_order_service().get_order(order_id, user_id=request.user.pk)
        return Response(OrderSerializer(order).data)


class OrderCancelView(APIView):
    """Handler for POST /api/orders/{order_id}/cancel"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, order_id: str) -> Response:
        service = get_order_service()
        service.get_order(order_id, user_id=request.user.pk)
        return Response(OrderSerializer(service.cancel_order(order_id)).data)


class OrderPaymentView(APIView):
    """Handler for POST /api/orders/{order_id}/payment"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, order_id: str) -> Response:
        payload = PaymentReferenceSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        service = get_order_service()
        service.get_order(order_id, user_id=request.user.pk)
        order = service.attach_payment_reference(
            order_id,
            payload.validated_data["payment_reference"],
            payload.validated_data["payment_method"],
        )
        return Response(OrderSerializer(order).data)


class OrderFulfillView(APIView):
    """Handler for POST /api/orders/{order_id}/fulfill (staff only)"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, order_id: str) -> Response:
        return Response(OrderSerializer(get_order_service().fulfill_order(order_id)).data)


class OrderRefundView(APIView):
    """Handler for POST /api/orders/{order_id}/refund (staff only)"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, order_id: str) -> Response:
        return Response(OrderSerializer(get_order_service().refund_order(order_id)).data)


class OrderSearchView(APIView):
    """Handler for GET /api/admin/orders (staff only)"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        query = OrderSearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = dict(query.validated_data)
        page = get_order_service().search_orders(query=params.pop("q"), **params)
        return Response(OrderPageSerializer(page).data)


class OrderStatsView(APIView):
    """Handler for GET /api/admin/orders/stats (staff only)"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        query = DateRangeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        stats = get_order_service().get_order_stats(**query.validated_data)
        return Response(OrderStatsSerializer(stats).data)


class BookingListView(APIView):
    """Handler for GET /api/bookings"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        query = BookingListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        bookings = get_order_service().list_user_bookings(request.user.pk, **query.validated_data)
        return Response(BookingSerializer(bookings, many=True).data)


class BookingDetailView(APIView):
    """Handler for GET /api/bookings/{booking_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, booking_id: str) -> Response:
        booking = get_order_service().get_booking(booking_id, user_id=request.user.pk)
        return Response(BookingSerializer(booking).data)
