"""Django cache implementation of the CartStore.

In production the cache alias points at Redis (django's RedisCache backend).
Carts are stored as JSON-compatible dicts under `cart:<user_key>`.
"""

import logging

from django.conf import settings
from django.core.cache import caches
from redis.exceptions import RedisError

from cart.domain import Cart
from cart.stores.interfaces import CartStore
from common.errors import InfrastructureError
from common.pricing import TaxPolicy

logger = logging.getLogger(__name__)


def cart_key(user_key: str) -> str:
    return f"cart:{user_key}"


class CacheCartStore(CartStore):
    """Cart store backed by a Django cache alias with a fixed TTL."""

    def __init__(
        self,
        tax_policy: TaxPolicy,
        alias: str | None = None,
        ttl: int | None = None,
    ) -> None:
        self._tax_policy = tax_policy
        self._alias = alias or settings.COMMERCE["CART_CACHE_ALIAS"]
        self._ttl = ttl if ttl is not None else settings.COMMERCE["CART_TTL_SECONDS"]

    @property
    def _cache(self):
        return caches[self._alias]

    def load(self, user_key: str) -> Cart | None:
        try:
            data = self._cache.get(cart_key(user_key))
        except RedisError as exc:
            logger.exception("Failed to read cart %s", user_key)
            raise InfrastructureError() from exc
        if data is None:
            return None
        return Cart.from_dict(data, self._tax_policy)

    def save(self, cart: Cart) -> None:
        try:
            self._cache.set(cart_key(cart.user_key), cart.to_dict(), timeout=self._ttl)
        except RedisError as exc:
            logger.exception("Failed to write cart %s", cart.user_key)
            raise InfrastructureError() from exc

    def delete(self, user_key: str) -> None:
        try:
            self._cache.delete(cart_key(user_key))
        except RedisError as exc:
            logger.exception("Failed to delete cart %s", user_key)
            raise InfrastructureError() from exc
