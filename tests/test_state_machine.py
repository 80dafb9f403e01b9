"""Tests for the order status transition table."""

import itertools

import pytest

from common.errors import ValidationError
from orders.domain import TRANSITIONS, OrderStatus, can_transition, ensure_transition

LEGAL = {
    (OrderStatus.PENDING, OrderStatus.PAYMENT_PENDING),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PAYMENT_PENDING, OrderStatus.PAID),
    (OrderStatus.PAYMENT_PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PAID, OrderStatus.PROCESSING),
    (OrderStatus.PAID, OrderStatus.CANCELLED),
    (OrderStatus.PROCESSING, OrderStatus.COMPLETED),
    (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    (OrderStatus.COMPLETED, OrderStatus.REFUNDED),
}
ALL_PAIRS = list(itertools.product(OrderStatus, repeat=2))


def test_table_covers_every_status():
    assert set(TRANSITIONS) == set(OrderStatus)


@pytest.mark.parametrize("current,requested", sorted(LEGAL))
def test_legal_transitions(current, requested):
    assert can_transition(current, requested)
    assert ensure_transition(current, requested) is requested


@pytest.mark.parametrize("current,requested", [p for p in ALL_PAIRS if p not in LEGAL])
def test_illegal_transitions_name_both_statuses(current, requested):
    with pytest.raises(ValidationError) as exc_info:
        ensure_transition(current, requested)
    assert current.value in exc_info.value.message
    assert requested.value in exc_info.value.message


def test_terminal_statuses():
    assert {s for s in OrderStatus if s.is_terminal} == {OrderStatus.CANCELLED, OrderStatus.REFUNDED}
