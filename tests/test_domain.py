"""Unit tests for domain primitives and the cart aggregate.

These test invariants that must hold at construction time and totals that
must always be derived from items.
Run with: pytest tests/test_domain.py -v
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone

from cart.domain import Cart, CartItem
from catalog.domain import Capacity, CatalogItemId, Event, ItemType
from common.pricing import Money, TaxPolicy, compute_totals
from orders.domain import OrderPage

TAX = TaxPolicy(rate=Decimal("0.08"))


def cart_item(item_type=ItemType.COURSE, price=5999, quantity=1, item_id=None) -> CartItem:
    return CartItem(
        item_type=item_type,
        item_id=item_id or CatalogItemId(uuid4()),
        title="Item",
        unit_price=Money(price),
        quantity=quantity,
    )


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_zero(self):
        assert Money(0).amount == 0

    def test_money_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Money(-1)

    def test_money_str_format(self):
        assert str(Money(5999)) == "59.99"
        assert str(Money(5)) == "0.05"


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_zero(self):
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-1)


class TestCatalogItemId:
    """Tests for CatalogItemId value object."""

    def test_from_string_valid_uuid(self):
        value = uuid4()
        assert CatalogItemId.from_string(str(value)).value == value

    def test_from_string_invalid_uuid(self):
        with pytest.raises(ValueError):
            CatalogItemId.from_string("not-a-uuid")


class TestTaxPolicy:
    """Tax is a fixed rate of subtotal rounded half up to the nearest cent."""

    def test_rounds_to_nearest_cent(self):
        assert TAX.tax_for(20998) == 1680

    def test_half_cent_rounds_up(self):
        assert TaxPolicy(rate=Decimal("0.1")).tax_for(5) == 1
        assert TaxPolicy(rate=Decimal("0.5")).tax_for(3) == 2

    def test_zero_subtotal(self):
        assert TAX.tax_for(0) == 0

    def test_compute_totals(self):
        totals = compute_totals([cart_item(price=5999), cart_item(price=14999, quantity=2)], TAX)
        assert totals.subtotal == 5999 + 2 * 14999
        assert totals.tax == TAX.tax_for(totals.subtotal)
        assert totals.total == totals.subtotal + totals.tax
        assert totals.item_count == 3


class TestCartItem:
    def test_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            cart_item(quantity=0)


class TestCart:
    """Cart totals are always recomputed from its items."""

    def test_empty_cart_has_zero_totals(self):
        cart = Cart(user_key="u1", tax_policy=TAX)
        assert (cart.subtotal, cart.tax, cart.total, cart.item_count) == (0, 0, 0, 0)

    def test_course_and_event_scenario(self):
        cart = Cart(user_key="u1", tax_policy=TAX)
        cart.add(cart_item(ItemType.COURSE, 5999))
        cart.add(cart_item(ItemType.EVENT, 14999))
        assert cart.subtotal == 20998
        assert cart.tax == 1680
        assert cart.total == 22678

    def test_adding_same_item_sums_quantities(self):
        item_id = CatalogItemId(uuid4())
        cart = Cart(user_key="u1", tax_policy=TAX)
        cart.add(cart_item(item_id=item_id, quantity=2))
        cart.add(cart_item(item_id=item_id, quantity=3))
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.item_count == 5

    def test_same_id_different_type_are_separate_lines(self):
        item_id = CatalogItemId(uuid4())
        cart = Cart(user_key="u1", tax_policy=TAX)
        cart.add(cart_item(ItemType.COURSE, item_id=item_id))
        cart.add(cart_item(ItemType.EVENT, item_id=item_id))
        assert len(cart.items) == 2

    def test_set_quantity_zero_removes_line(self):
        item = cart_item()
        cart = Cart(user_key="u1", tax_policy=TAX, items=[item])
        assert cart.set_quantity(item.item_type, item.item_id, 0)
        assert cart.items == []
        assert cart.total == 0

    def test_set_quantity_missing_line(self):
        cart = Cart(user_key="u1", tax_policy=TAX)
        assert not cart.set_quantity(ItemType.COURSE, CatalogItemId(uuid4()), 2)

    def test_dict_round_trip_recomputes_totals(self):
        cart = Cart(user_key="u1", tax_policy=TAX)
        cart.add(cart_item(price=1000, quantity=2))
        data = cart.to_dict()
        data["total"] = 1  # stale stored totals are ignored
        restored = Cart.from_dict(data, TAX)
        assert restored.items == cart.items
        assert restored.total == cart.total


class TestEvent:
    def test_remaining_seats(self):
        event = Event(
            id=CatalogItemId(uuid4()),
            item_type=ItemType.EVENT,
            title="Retreat",
            price=Money(100),
            is_published=True,
            deleted_at=None,
            starts_at=timezone.now() + timedelta(days=1),
            capacity=Capacity(5),
            booked_count=3,
        )
        assert event.remaining == 2


class TestOrderPage:
    def test_pages_round_up(self):
        assert OrderPage(orders=(), total=41, page=1, limit=20).pages == 3
        assert OrderPage(orders=(), total=0, page=1, limit=20).pages == 0
