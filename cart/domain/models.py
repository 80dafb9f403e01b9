"""Cart aggregate.

Totals are properties computed from the lines on every read, so they can never
drift from the items that produce them.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Self

from django.utils import timezone

from catalog.domain import CatalogItemId, ItemType
from common.pricing import Money, TaxPolicy, Totals, compute_totals


@dataclass(frozen=True)
class CartItem:
    """A prospective purchase with the title and price captured when it was added."""

    item_type: ItemType
    item_id: CatalogItemId
    title: str
    unit_price: Money
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("Cart item quantity must be at least 1")

    @property
    def key(self) -> tuple[ItemType, CatalogItemId]:
        return (self.item_type, self.item_id)

    @property
    def line_subtotal(self) -> int:
        return self.unit_price.amount * self.quantity

    def to_dict(self) -> dict:
        return {
            "item_type": self.item_type.value,
            "item_id": str(self.item_id),
            "title": self.title,
            "unit_price": self.unit_price.amount,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        return cls(
            item_type=ItemType(data["item_type"]),
            item_id=CatalogItemId.from_string(data["item_id"]),
            title=data["title"],
            unit_price=Money(int(data["unit_price"])),
            quantity=int(data["quantity"]),
        )


@dataclass
class Cart:
    """Per-user collection of cart items, unique on (item_type, item_id)."""

    user_key: str
    tax_policy: TaxPolicy
    items: list[CartItem] = field(default_factory=list)
    updated_at: datetime = field(default_factory=timezone.now)

    @property
    def totals(self) -> Totals:
        return compute_totals(self.items, self.tax_policy)

    @property
    def subtotal(self) -> int:
        return self.totals.subtotal

    @property
    def tax(self) -> int:
        return self.totals.tax

    @property
    def total(self) -> int:
        return self.totals.total

    @property
    def item_count(self) -> int:
        return self.totals.item_count

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_type: ItemType, item_id: CatalogItemId) -> CartItem | None:
        for item in self.items:
            if item.key == (item_type, item_id):
                return item
        return None

    def add(self, new_item: CartItem) -> None:
        """Append a line, or sum quantities into the existing line for the same item."""
        for index, item in enumerate(self.items):
            if item.key == new_item.key:
                self.items[index] = replace(item, quantity=item.quantity + new_item.quantity)
                break
        else:
            self.items.append(new_item)
        self.touch()

    def set_quantity(self, item_type: ItemType, item_id: CatalogItemId, quantity: int) -> bool:
        """Set a line's quantity; zero removes it. Returns False if the line is absent."""
        for index, item in enumerate(self.items):
            if item.key == (item_type, item_id):
                if quantity == 0:
                    del self.items[index]
                else:
                    self.items[index] = replace(item, quantity=quantity)
                self.touch()
                return True
        return False

    def merge(self, other: "Cart") -> None:
        for item in other.items:
            self.add(item)

    def touch(self) -> None:
        self.updated_at = timezone.now()

    def to_dict(self) -> dict:
        totals = self.totals
        return {
            "user_key": self.user_key,
            "items": [item.to_dict() for item in self.items],
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "total": totals.total,
            "item_count": totals.item_count,
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict, tax_policy: TaxPolicy) -> Self:
        # Stored totals are informational only; they are recomputed from items.
        return cls(
            user_key=data["user_key"],
            tax_policy=tax_policy,
            items=[CartItem.from_dict(item) for item in data.get("items", [])],
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
