from django.urls import path

from cart.handlers import CartItemDetailView, CartItemListView, CartValidationView, CartView

urlpatterns = [
    path("cart", CartView.as_view(), name="cart"),
    path("cart/items", CartItemListView.as_view(), name="cart-items"),
    path(
        "cart/items/<str:item_type>/<str:item_id>",
        CartItemDetailView.as_view(),
        name="cart-item-detail",
    ),
    path("cart/validate", CartValidationView.as_view(), name="cart-validate"),
]
