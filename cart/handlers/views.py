"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Never contain business logic

Domain errors are mapped to responses by common.exception_handler.
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.handlers.serializers import AddCartItemSerializer, CartSerializer, UpdateCartItemSerializer
from cart.services import get_cart_service
from cart.session import cart_key_for


class CartView(APIView):
    """Handler for GET and DELETE /api/cart"""

    def get(self, request: Request) -> Response:
        cart = get_cart_service().get_cart(cart_key_for(request))
        return Response(CartSerializer(cart).data)

    def delete(self, request: Request) -> Response:
        get_cart_service().clear_cart(cart_key_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemListView(APIView):
    """Handler for POST /api/cart/items"""

    def post(self, request: Request) -> Response:
        payload = AddCartItemSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        cart = get_cart_service().add_item(
            cart_key_for(request),
            payload.validated_data["item_type"],
            payload.validated_data["item_id"],
            payload.validated_data["quantity"],
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    """Handler for PATCH and DELETE /api/cart/items/{item_type}/{item_id}"""

    def patch(self, request: Request, item_type: str, item_id: str) -> Response:
        payload = UpdateCartItemSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        cart = get_cart_service().update_item_quantity(
            cart_key_for(request), item_type, item_id, payload.validated_data["quantity"]
        )
        return Response(CartSerializer(cart).data)

    def delete(self, request: Request, item_type: str, item_id: str) -> Response:
        cart = get_cart_service().remove_item(cart_key_for(request), item_type, item_id)
        return Response(CartSerializer(cart).data)


class CartValidationView(APIView):
    """Handler for GET /api/cart/validate"""

    def get(self, request: Request) -> Response:
        errors = get_cart_service().validate_cart(cart_key_for(request))
        return Response({"valid": not errors, "errors": errors})
