from cart.handlers.views import CartItemDetailView, CartItemListView, CartValidationView, CartView

__all__ = ["CartView", "CartItemListView", "CartItemDetailView", "CartValidationView"]
