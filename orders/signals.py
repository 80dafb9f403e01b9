"""Signals sent by the order service after a transaction commits.

Receivers (cart clearing, notifications) are called with send_robust; their
failures are logged and never undo the committed order.
"""

from django.dispatch import Signal

# kwargs: order
order_created = Signal()
order_fulfilled = Signal()
order_refunded = Signal()
