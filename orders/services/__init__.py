from django.conf import settings

from catalog.stores import DjangoCatalogStore
from common.pricing import TaxPolicy
from orders.services.order_service import OrderService
from orders.stores import DjangoOrderStore


def get_order_service() -> OrderService:
    return OrderService(
        store=DjangoOrderStore(),
        catalog=DjangoCatalogStore(),
        tax_policy=TaxPolicy.from_settings(),
        max_page_limit=settings.COMMERCE["ORDERS_PAGE_LIMIT"],
    )


__all__ = ["OrderService", "get_order_service"]
