"""Resolves which cart a request is working on.

Authenticated users own the cart keyed by their primary key. Anonymous
visitors get a guest key kept in their session, which survives the session
key rotation that happens on login so the guest cart can be merged.
"""

from uuid import uuid4

GUEST_CART_SESSION_KEY = "guest_cart_key"


def cart_key_for(request) -> str:
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return str(user.pk)
    key = request.session.get(GUEST_CART_SESSION_KEY)
    if not key:
        key = f"guest:{uuid4()}"
        request.session[GUEST_CART_SESSION_KEY] = key
    return key
