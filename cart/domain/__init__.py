from cart.domain.models import Cart, CartItem

__all__ = ["Cart", "CartItem"]
