"""Signal receivers connecting the cart to login and order fulfillment."""

import logging

from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from cart.services import get_cart_service
from cart.session import GUEST_CART_SESSION_KEY
from common.errors import InfrastructureError
from orders.signals import order_fulfilled

logger = logging.getLogger(__name__)


@receiver(user_logged_in)
def merge_guest_cart_on_login(sender, request, user, **kwargs):
    """Fold the session's guest cart into the user's cart."""
    if request is None or not hasattr(request, "session"):
        return
    guest_key = request.session.get(GUEST_CART_SESSION_KEY)
    if not guest_key:
        return
    try:
        get_cart_service().merge_guest_cart(guest_key, str(user.pk))
    except InfrastructureError:
        # Guest key stays in the session; the next login retries the merge.
        logger.exception("Guest cart merge failed for user %s", user.pk)
        return
    del request.session[GUEST_CART_SESSION_KEY]


@receiver(order_fulfilled)
def clear_cart_on_fulfillment(sender, order, **kwargs):
    """Empty the buyer's cart once their order has been fulfilled."""
    get_cart_service().clear_cart(str(order.user_id))
