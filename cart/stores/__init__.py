from cart.stores.cache_store import CacheCartStore
from cart.stores.interfaces import CartStore

__all__ = ["CartStore", "CacheCartStore"]
