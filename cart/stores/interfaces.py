"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from cart.domain import Cart


class CartStore(ABC):
    """Interface for ephemeral cart persistence (last write wins per key)."""

    @abstractmethod
    def load(self, user_key: str) -> Cart | None:
        """Return the stored cart, or None if there is none or it expired."""
        ...

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Write the whole cart and refresh its expiry."""
        ...

    @abstractmethod
    def delete(self, user_key: str) -> None:
        """Remove the stored cart if present."""
        ...
