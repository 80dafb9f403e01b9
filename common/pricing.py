"""Money and totals computation shared by the cart and order creation.

All amounts are integer minor currency units (cents).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol, Self

from django.conf import settings


@dataclass(frozen=True)
class Money:
    """Non-negative amount in minor currency units."""

    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        units, cents = divmod(self.amount, 100)
        return f"{units}.{cents:02d}"


class PricedLine(Protocol):
    """Anything with a unit price and a quantity (cart or order lines)."""

    unit_price: Money
    quantity: int


@dataclass(frozen=True)
class TaxPolicy:
    """Flat-rate tax, rounded half up to the nearest minor unit."""

    rate: Decimal

    def tax_for(self, subtotal: int) -> int:
        return int((Decimal(subtotal) * self.rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @classmethod
    def from_settings(cls) -> Self:
        return cls(rate=Decimal(str(settings.COMMERCE["TAX_RATE"])))


@dataclass(frozen=True)
class Totals:
    subtotal: int
    tax: int
    total: int
    item_count: int


def compute_totals(lines: Iterable[PricedLine], policy: TaxPolicy) -> Totals:
    """Compute subtotal, tax, total and item count for a set of priced lines.

    Used unchanged by the cart and by order creation so the displayed cart
    total and the charged order total agree to the cent.
    """
    subtotal = 0
    item_count = 0
    for line in lines:
        subtotal += line.unit_price.amount * line.quantity
        item_count += line.quantity
    tax = policy.tax_for(subtotal)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax, item_count=item_count)
