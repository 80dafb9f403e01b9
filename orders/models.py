"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
Orders and their items are permanent records; fulfillment side effects
(enrollments, bookings, download grants) are keyed on the order item so they
can be applied at most once.
"""

import uuid

from django.conf import settings
from django.db import models

from catalog.domain import ItemType
from orders.domain.state_machine import OrderStatus

ITEM_TYPE_CHOICES = [(t.value, t.value) for t in ItemType]


class Order(models.Model):
    """Persistence model for orders."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders")
    status = models.CharField(
        max_length=20,
        choices=[(s.value, s.value) for s in OrderStatus],
        default=OrderStatus.PENDING.value,
    )
    subtotal_cents = models.PositiveIntegerField()
    tax_cents = models.PositiveIntegerField()
    total_cents = models.PositiveIntegerField()
    payment_reference = models.CharField(max_length=255, unique=True, blank=True, null=True)
    payment_method = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
            models.Index(fields=["status"], name="orders_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(models.Model):
    """Persistence model for order line items (frozen snapshots)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    item_type = models.CharField(max_length=20, choices=ITEM_TYPE_CHOICES)
    item_id = models.UUIDField()
    title = models.CharField(max_length=255)
    unit_price_cents = models.PositiveIntegerField()
    quantity = models.PositiveIntegerField()
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name="order_item_quantity_positive"),
        ]

    def __str__(self) -> str:
        return f"{self.title} x{self.quantity}"


class Booking(models.Model):
    """Persistence model for event seat bookings."""

    class Status(models.TextChoices):
        CONFIRMED = "confirmed"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="bookings")
    event = models.ForeignKey("catalog.Event", on_delete=models.PROTECT, related_name="bookings")
    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="bookings")
    order_item = models.OneToOneField(OrderItem, on_delete=models.PROTECT, related_name="booking")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.CONFIRMED)
    attendees = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["event", "status"], name="bookings_event_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} ({self.status})"


class CourseEnrollment(models.Model):
    """Access to a course granted by a fulfilled order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrollments")
    course = models.ForeignKey("catalog.Course", on_delete=models.CASCADE, related_name="enrollments")
    order_item = models.ForeignKey(OrderItem, on_delete=models.SET_NULL, null=True, related_name="enrollments")
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "course"], name="unique_course_enrollment"),
        ]


class DownloadGrant(models.Model):
    """Right to download a digital product granted by a fulfilled order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="download_grants")
    product = models.ForeignKey("catalog.DigitalProduct", on_delete=models.CASCADE, related_name="grants")
    order_item = models.OneToOneField(OrderItem, on_delete=models.PROTECT, related_name="download_grant")
    download_limit = models.PositiveIntegerField(default=3)
    granted_at = models.DateTimeField(auto_now_add=True)
    revoked_at = models.DateTimeField(blank=True, null=True)
