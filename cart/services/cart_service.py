"""Cart service - all cart business logic lives here.

Services:
- Depend only on interfaces (stores) and the availability checker
- Validate quantities and catalog lookups
- Return domain models or raise domain errors

The cart store is last-write-wins per key and is never used to enforce
correctness; the order service re-checks everything transactionally.
"""

import logging

from cart.domain import Cart, CartItem
from cart.stores.interfaces import CartStore
from catalog.domain import CatalogItemId, ItemType
from catalog.services.availability import (
    NOT_FOUND,
    Availability,
    AvailabilityChecker,
    describe_unavailable,
    parse_item_id,
    parse_item_type,
)
from common.errors import NotFoundError, ValidationError
from common.pricing import TaxPolicy

logger = logging.getLogger(__name__)


def _discrepancies(item: CartItem, availability: Availability) -> list[str]:
    if availability.reason == NOT_FOUND:
        return [describe_unavailable(item.item_type, item.title, NOT_FOUND)]

    messages = []
    if availability.reason is not None:
        messages.append(describe_unavailable(item.item_type, item.title, availability.reason))
    if availability.current_price is not None and availability.current_price != item.unit_price:
        messages.append(f'Price for "{item.title}" has changed')
    return messages


class CartService:
    """Service for per-user cart operations."""

    def __init__(self, store: CartStore, availability: AvailabilityChecker, tax_policy: TaxPolicy) -> None:
        self._store = store
        self._availability = availability
        self._tax_policy = tax_policy

    def _empty(self, user_key: str) -> Cart:
        return Cart(user_key=user_key, tax_policy=self._tax_policy)

    def _parse(self, item_type: ItemType | str, item_id: CatalogItemId | str) -> tuple[ItemType, CatalogItemId]:
        if not isinstance(item_type, ItemType):
            item_type = parse_item_type(item_type)
        if not isinstance(item_id, CatalogItemId):
            parsed = parse_item_id(item_id)
            if parsed is None:
                raise NotFoundError(item_type.label)
            item_id = parsed
        return item_type, item_id

    def get_cart(self, user_key: str) -> Cart:
        """Return the stored cart, or an empty one if none exists or it expired."""
        return self._store.load(user_key) or self._empty(user_key)

    def get_item_count(self, user_key: str) -> int:
        return self.get_cart(user_key).item_count

    def add_item(
        self,
        user_key: str,
        item_type: ItemType | str,
        item_id: CatalogItemId | str,
        quantity: int = 1,
    ) -> Cart:
        """Add an item, summing quantities if it is already in the cart.

        Raises:
            ValidationError: If quantity < 1 or the item cannot be bought right now.
            NotFoundError: If the catalog item does not exist.
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        item_type, item_id = self._parse(item_type, item_id)

        availability = self._availability.check(item_type, item_id)
        if availability.reason == NOT_FOUND:
            raise NotFoundError(item_type.label)
        if not availability.available:
            raise ValidationError(describe_unavailable(item_type, availability.title, availability.reason))

        cart = self.get_cart(user_key)
        cart.add(
            CartItem(
                item_type=item_type,
                item_id=item_id,
                title=availability.title,
                unit_price=availability.current_price,
                quantity=quantity,
            )
        )
        self._store.save(cart)
        logger.debug("Added %s %s x%d to cart %s", item_type.value, item_id, quantity, user_key)
        return cart

    def update_item_quantity(
        self,
        user_key: str,
        item_type: ItemType | str,
        item_id: CatalogItemId | str,
        quantity: int,
    ) -> Cart:
        """Set a line's quantity; zero removes the line.

        Raises:
            ValidationError: If quantity is negative.
            NotFoundError: If there is no cart or the item is not in it.
        """
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        item_type, item_id = self._parse(item_type, item_id)

        cart = self._store.load(user_key)
        if cart is None:
            raise NotFoundError("Cart")
        if not cart.set_quantity(item_type, item_id, quantity):
            raise NotFoundError("Cart item")
        self._store.save(cart)
        return cart

    def remove_item(self, user_key: str, item_type: ItemType | str, item_id: CatalogItemId | str) -> Cart:
        return self.update_item_quantity(user_key, item_type, item_id, 0)

    def clear_cart(self, user_key: str) -> None:
        self._store.delete(user_key)

    def merge_guest_cart(self, guest_key: str, user_key: str) -> Cart:
        """Fold a guest cart into a user's cart and delete the guest cart.

        A second call finds no guest cart and returns the user's cart untouched.
        """
        if guest_key == user_key:
            return self.get_cart(user_key)
        guest_cart = self._store.load(guest_key)
        if guest_cart is None:
            return self.get_cart(user_key)

        user_cart = self.get_cart(user_key)
        user_cart.merge(guest_cart)
        self._store.save(user_cart)
        self._store.delete(guest_key)
        logger.info("Merged guest cart %s into %s (%d items)", guest_key, user_key, user_cart.item_count)
        return user_cart

    def validate_cart(self, user_key: str) -> list[str]:
        """Return discrepancy messages for the cart; an empty list means safe to check out."""
        errors: list[str] = []
        for item in self.get_cart(user_key).items:
            errors.extend(_discrepancies(item, self._availability.check(item.item_type, item.item_id)))
        return errors

    def check_item_availability(self, item_type: ItemType | str, item_id: CatalogItemId | str) -> Availability:
        return self._availability.check(item_type, item_id)
