"""HTTP handlers (views) - handle HTTP concerns only."""

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.services import get_cart_service
from catalog.handlers.serializers import AvailabilitySerializer


class AvailabilityView(APIView):
    """Handler for GET /api/catalog/{item_type}/{item_id}/availability

    Answers the same question the cart asks before adding an item.
    """

    def get(self, request: Request, item_type: str, item_id: str) -> Response:
        availability = get_cart_service().check_item_availability(item_type, item_id)
        return Response(AvailabilitySerializer(availability).data)
