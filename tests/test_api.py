"""Integration tests for the cart, availability and order HTTP endpoints.

Run with: pytest tests/test_api.py -v
"""

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from cart.session import GUEST_CART_SESSION_KEY
from orders.models import Order as OrderRow


def add_to_cart(client: APIClient, row, item_type: str, quantity: int = 1):
    return client.post(
        reverse("cart-items"),
        {"item_type": item_type, "item_id": str(row.id), "quantity": quantity},
        format="json",
    )


@pytest.mark.django_db
class TestCart:
    """Tests for /api/cart and /api/cart/items"""

    def test_guest_gets_empty_cart(self, api_client: APIClient):
        """Given no cart, returns zero totals."""
        response = api_client.get(reverse("cart"))
        assert response.status_code == 200
        assert response.data["items"] == []
        assert response.data["total"] == 0

    def test_add_items_returns_totals(self, api_client: APIClient, make_course, make_event):
        """Given a course and an event, returns the cart with tax applied."""
        add_to_cart(api_client, make_course(price_cents=5999), "course")
        response = add_to_cart(api_client, make_event(price_cents=14999), "event")
        assert response.status_code == 201
        assert (response.data["subtotal"], response.data["tax"], response.data["total"]) == (20998, 1680, 22678)
        assert response.data["item_count"] == 2

    def test_guest_cart_survives_between_requests(self, api_client: APIClient, make_course):
        """Given a guest adds an item, the same session sees it later."""
        add_to_cart(api_client, make_course(), "course", 2)
        response = api_client.get(reverse("cart"))
        assert response.data["item_count"] == 2

    def test_unknown_item_returns_404(self, api_client: APIClient):
        """Given a missing catalog item, returns 404 with the error body."""
        response = api_client.post(
            reverse("cart-items"),
            {"item_type": "course", "item_id": "00000000-0000-0000-0000-000000000000"},
            format="json",
        )
        assert response.status_code == 404
        assert response.data == {"error": {"code": "NOT_FOUND", "message": "Course not found"}}

    def test_fully_booked_event_returns_400(self, api_client: APIClient, make_event):
        """Given a full event, returns 400 naming the event."""
        event = make_event(title="Drum Circle", capacity=1, booked_count=1)
        response = add_to_cart(api_client, event, "event")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION"
        assert response.data["error"]["message"] == 'Event "Drum Circle" is fully booked'

    def test_invalid_item_type_returns_400(self, api_client: APIClient):
        """Given an unsupported item type, returns 400."""
        response = api_client.post(
            reverse("cart-items"), {"item_type": "membership", "item_id": "x"}, format="json"
        )
        assert response.status_code == 400

    def test_update_and_remove_item(self, api_client: APIClient, make_course):
        """PATCH sets the quantity and DELETE removes the line."""
        course = make_course(price_cents=1000)
        add_to_cart(api_client, course, "course")
        url = reverse("cart-item-detail", args=["course", str(course.id)])

        response = api_client.patch(url, {"quantity": 3}, format="json")
        assert response.status_code == 200
        assert response.data["subtotal"] == 3000

        response = api_client.delete(url)
        assert response.status_code == 200
        assert response.data["items"] == []

    def test_update_missing_line_returns_404(self, api_client: APIClient, make_course):
        """Given an item that is not in the cart, returns 404."""
        add_to_cart(api_client, make_course(), "course")
        url = reverse("cart-item-detail", args=["course", str(make_course().id)])
        response = api_client.patch(url, {"quantity": 3}, format="json")
        assert response.status_code == 404

    def test_clear_cart(self, api_client: APIClient, make_course):
        """DELETE /api/cart empties the cart."""
        add_to_cart(api_client, make_course(), "course")
        assert api_client.delete(reverse("cart")).status_code == 204
        assert api_client.get(reverse("cart")).data["items"] == []

    def test_validate_reports_price_change(self, api_client: APIClient, make_course):
        """Given a price change, validation lists it without changing the cart."""
        course = make_course(title="Tarot", price_cents=1000)
        add_to_cart(api_client, course, "course")
        course.price_cents = 1100
        course.save()

        response = api_client.get(reverse("cart-validate"))

        assert response.data == {"valid": False, "errors": ['Price for "Tarot" has changed']}


@pytest.mark.django_db
class TestGuestCartMerge:
    """Logging in folds the session's guest cart into the user's cart."""

    def test_login_merges_guest_cart(self, api_client: APIClient, user, make_course, make_event):
        course = make_course(price_cents=1000)
        event = make_event(price_cents=2000)
        add_to_cart(api_client, course, "course")
        add_to_cart(api_client, event, "event")

        api_client.force_login(user)
        response = api_client.get(reverse("cart"))

        assert response.data["item_count"] == 2
        assert response.data["subtotal"] == 3000
        assert GUEST_CART_SESSION_KEY not in api_client.session

    def test_merge_sums_existing_lines(self, api_client: APIClient, cart_service, user, make_course):
        course = make_course()
        cart_service.add_item(str(user.pk), "course", str(course.id), 2)
        add_to_cart(api_client, course, "course")

        api_client.force_login(user)

        assert api_client.get(reverse("cart")).data["items"][0]["quantity"] == 3


@pytest.mark.django_db
class TestAvailability:
    """Tests for GET /api/catalog/{item_type}/{item_id}/availability"""

    def test_available_item(self, api_client: APIClient, make_course):
        course = make_course(title="Qigong", price_cents=4500)
        response = api_client.get(reverse("catalog-availability", args=["course", str(course.id)]))
        assert response.status_code == 200
        assert response.data == {"available": True, "reason": None, "current_price": 4500, "title": "Qigong"}

    def test_fully_booked_event(self, api_client: APIClient, make_event):
        event = make_event(capacity=2, booked_count=2)
        response = api_client.get(reverse("catalog-availability", args=["event", str(event.id)]))
        assert response.data["available"] is False
        assert response.data["reason"] == "fully booked"

    def test_malformed_id_is_not_found(self, api_client: APIClient):
        response = api_client.get(reverse("catalog-availability", args=["course", "nope"]))
        assert response.status_code == 200
        assert response.data["reason"] == "not found"

    def test_unknown_type_returns_400(self, api_client: APIClient):
        response = api_client.get(reverse("catalog-availability", args=["membership", "nope"]))
        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION"


@pytest.mark.django_db
class TestCheckout:
    """Tests for GET and POST /api/orders"""

    def test_requires_login(self, api_client: APIClient):
        """Given an anonymous client, checkout is refused."""
        response = api_client.post(reverse("order-list"))
        assert response.status_code == 403
        assert response.data["error"]["code"] == "REQUEST_ERROR"

    def test_checkout_creates_pending_order(self, api_client: APIClient, user, make_course, make_event):
        """Given a valid cart, returns the created order."""
        api_client.force_login(user)
        add_to_cart(api_client, make_course(price_cents=5999), "course")
        add_to_cart(api_client, make_event(price_cents=14999), "event")

        response = api_client.post(reverse("order-list"))

        assert response.status_code == 201
        assert response.data["status"] == "pending"
        assert response.data["total"] == 22678
        assert [item["item_type"] for item in response.data["items"]] == ["course", "event"]
        assert OrderRow.objects.filter(user=user).count() == 1

    def test_empty_cart_returns_400(self, api_client: APIClient, user):
        api_client.force_login(user)
        response = api_client.post(reverse("order-list"))
        assert response.status_code == 400
        assert response.data["error"]["message"] == "Cart is empty"

    def test_stale_cart_blocks_checkout(self, api_client: APIClient, user, make_course):
        """Given a price change since the item was added, checkout is refused."""
        api_client.force_login(user)
        course = make_course(title="Tarot", price_cents=1000)
        add_to_cart(api_client, course, "course")
        course.price_cents = 1200
        course.save()

        response = api_client.post(reverse("order-list"))

        assert response.status_code == 400
        assert response.data["error"]["message"] == 'Price for "Tarot" has changed'
        assert not OrderRow.objects.exists()

    def test_list_only_own_orders(self, api_client: APIClient, user, other_user, checkout_for):
        checkout_for(user)
        checkout_for(user)
        checkout_for(other_user)
        api_client.force_login(user)

        response = api_client.get(reverse("order-list"), {"limit": 1})

        assert response.status_code == 200
        assert response.data["total"] == 2
        assert response.data["pages"] == 2
        assert len(response.data["orders"]) == 1

    def test_list_rejects_oversized_limit(self, api_client: APIClient, user):
        api_client.force_login(user)
        response = api_client.get(reverse("order-list"), {"limit": 500})
        assert response.status_code == 400


@pytest.fixture
def checkout_for(cart_service, order_service, make_course):
    """Create a pending order for the user directly through the services."""

    def run(user, price_cents=5999):
        cart = cart_service.add_item(str(user.pk), "course", str(make_course(price_cents=price_cents).id))
        order = order_service.create_order(user.pk, cart.items)
        cart_service.clear_cart(str(user.pk))
        return order

    return run


@pytest.mark.django_db
class TestOrderDetail:
    """Tests for /api/orders/{order_id} and its actions"""

    def test_owner_sees_order(self, api_client: APIClient, user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(user)
        response = api_client.get(reverse("order-detail", args=[str(order.id)]))
        assert response.status_code == 200
        assert response.data["id"] == str(order.id)

    def test_other_user_is_forbidden(self, api_client: APIClient, user, other_user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(other_user)
        response = api_client.get(reverse("order-detail", args=[str(order.id)]))
        assert response.status_code == 403
        assert response.data["error"]["code"] == "FORBIDDEN"

    def test_invalid_id_returns_404(self, api_client: APIClient, user):
        api_client.force_login(user)
        response = api_client.get(reverse("order-detail", args=["not-a-uuid"]))
        assert response.status_code == 404

    def test_cancel(self, api_client: APIClient, user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(user)
        response = api_client.post(reverse("order-cancel", args=[str(order.id)]))
        assert response.status_code == 200
        assert response.data["status"] == "cancelled"

    def test_other_user_cannot_cancel(self, api_client: APIClient, user, other_user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(other_user)
        response = api_client.post(reverse("order-cancel", args=[str(order.id)]))
        assert response.status_code == 403
        assert OrderRow.objects.get(pk=order.id.value).status == "pending"

    def test_attach_payment_twice_conflicts(self, api_client: APIClient, user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(user)
        url = reverse("order-payment", args=[str(order.id)])

        first = api_client.post(url, {"payment_reference": "pi_1", "payment_method": "card"}, format="json")
        second = api_client.post(url, {"payment_reference": "pi_2"}, format="json")

        assert first.status_code == 200
        assert first.data["status"] == "payment_pending"
        assert second.status_code == 409
        assert second.data["error"]["code"] == "CONFLICT"


@pytest.mark.django_db
class TestStaffActions:
    """Tests for the staff-only fulfill and refund endpoints"""

    def test_customer_cannot_fulfill(self, api_client: APIClient, user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(user)
        response = api_client.post(reverse("order-fulfill", args=[str(order.id)]))
        assert response.status_code == 403

    def test_unpaid_order_cannot_be_fulfilled(self, api_client: APIClient, user, staff_user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(staff_user)
        response = api_client.post(reverse("order-fulfill", args=[str(order.id)]))
        assert response.status_code == 400
        assert response.data["error"]["message"] == "Order must be paid before fulfillment"

    def test_fulfill_then_refund(self, api_client: APIClient, order_service, user, staff_user, checkout_for):
        order = checkout_for(user)
        order_service.attach_payment_reference(order.id, "pi_staff")
        order_service.mark_paid(order.id)
        api_client.force_login(staff_user)

        fulfilled = api_client.post(reverse("order-fulfill", args=[str(order.id)]))
        again = api_client.post(reverse("order-fulfill", args=[str(order.id)]))
        refunded = api_client.post(reverse("order-refund", args=[str(order.id)]))

        assert fulfilled.data["status"] == "completed"
        assert fulfilled.data["completed_at"] is not None
        assert again.status_code == 200
        assert refunded.data["status"] == "refunded"

    def test_refund_pending_order_returns_400(self, api_client: APIClient, user, staff_user, checkout_for):
        order = checkout_for(user)
        api_client.force_login(staff_user)
        response = api_client.post(reverse("order-refund", args=[str(order.id)]))
        assert response.status_code == 400


@pytest.mark.django_db
class TestStaffOrderSearch:
    """Tests for GET /api/admin/orders and /api/admin/orders/stats"""

    def test_customer_cannot_search(self, api_client: APIClient, user):
        api_client.force_login(user)
        assert api_client.get(reverse("admin-order-search")).status_code == 403

    def test_search_by_email_and_status(self, api_client: APIClient, user, other_user, staff_user, checkout_for):
        checkout_for(user)
        theirs = checkout_for(other_user)
        api_client.force_login(staff_user)

        response = api_client.get(reverse("admin-order-search"), {"q": "pilgrim", "status": "pending"})

        assert response.status_code == 200
        assert [o["id"] for o in response.data["orders"]] == [str(theirs.id)]
        assert response.data["total"] == 1

    def test_bad_date_returns_400(self, api_client: APIClient, staff_user):
        api_client.force_login(staff_user)
        response = api_client.get(reverse("admin-order-search"), {"created_from": "yesterday"})
        assert response.status_code == 400

    def test_stats(self, api_client: APIClient, order_service, user, staff_user, checkout_for):
        order = checkout_for(user, price_cents=2500)
        order_service.attach_payment_reference(order.id, "pi_stats")
        order_service.confirm_payment("pi_stats")
        api_client.force_login(staff_user)

        response = api_client.get(reverse("admin-order-stats"))

        assert response.status_code == 200
        assert response.data["order_count"] == 1
        assert response.data["total_revenue"] == order.total
        assert response.data["orders_by_status"] == {"completed": 1}
        assert response.data["top_items"][0]["total_revenue"] == 2500


@pytest.mark.django_db
class TestBookingEndpoints:
    """Tests for GET /api/bookings and /api/bookings/{booking_id}"""

    @pytest.fixture
    def booked(self, cart_service, order_service, make_event):
        """Buy and fulfil a seat at a fresh event for the user."""

        def run(user, **event_fields):
            event = make_event(**event_fields)
            cart = cart_service.add_item(str(user.pk), "event", str(event.id))
            order = order_service.create_order(user.pk, cart.items)
            order_service.attach_payment_reference(order.id, f"pi_{order.id.value.hex}")
            order_service.confirm_payment(f"pi_{order.id.value.hex}")
            return order_service.list_user_bookings(user.pk)[0]

        return run

    def test_requires_login(self, api_client: APIClient):
        assert api_client.get(reverse("booking-list")).status_code == 403

    def test_lists_own_bookings(self, api_client: APIClient, user, other_user, booked):
        booking = booked(user, title="Sound Bath")
        booked(other_user)
        api_client.force_login(user)

        response = api_client.get(reverse("booking-list"))

        assert response.status_code == 200
        assert [(b["id"], b["event_title"], b["status"]) for b in response.data] == [
            (booking.id, "Sound Bath", "confirmed")
        ]

    def test_detail_for_owner_only(self, api_client: APIClient, user, other_user, booked):
        booking = booked(user)
        url = reverse("booking-detail", args=[booking.id])

        api_client.force_login(user)
        assert api_client.get(url).data["id"] == booking.id

        api_client.force_login(other_user)
        response = api_client.get(url)
        assert response.status_code == 403
        assert response.data["error"]["code"] == "FORBIDDEN"

    def test_unknown_booking_returns_404(self, api_client: APIClient, user):
        api_client.force_login(user)
        response = api_client.get(reverse("booking-detail", args=["00000000-0000-0000-0000-000000000000"]))
        assert response.status_code == 404
