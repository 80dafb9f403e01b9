from cart.services.cart_service import CartService
from cart.stores import CacheCartStore
from catalog.services import AvailabilityChecker
from catalog.stores import DjangoCatalogStore
from common.pricing import TaxPolicy


def get_cart_service() -> CartService:
    tax_policy = TaxPolicy.from_settings()
    return CartService(
        store=CacheCartStore(tax_policy),
        availability=AvailabilityChecker(DjangoCatalogStore()),
        tax_policy=tax_policy,
    )


__all__ = ["CartService", "get_cart_service"]
