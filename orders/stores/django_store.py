"""Django ORM implementation of the OrderStore."""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q, Sum
from django.utils import timezone

from catalog import models as catalog_orm
from catalog.domain import CatalogItemId, ItemType
from common.errors import ConflictError
from common.pricing import Money, Totals
from orders import models as orm
from orders.domain import Booking, NewOrderLine, Order, OrderId, OrderItem, OrderStats, OrderStatus, TopItem
from orders.stores.interfaces import OrderStore


def item_to_domain(row: orm.OrderItem) -> OrderItem:
    return OrderItem(
        id=str(row.id),
        item_type=ItemType(row.item_type),
        item_id=CatalogItemId(row.item_id),
        title=row.title,
        unit_price=Money(row.unit_price_cents),
        quantity=row.quantity,
    )


def order_to_domain(row: orm.Order, items: Iterable[orm.OrderItem]) -> Order:
    return Order(
        id=OrderId(row.id),
        user_id=row.user_id,
        status=OrderStatus(row.status),
        subtotal=row.subtotal_cents,
        tax=row.tax_cents,
        total=row.total_cents,
        payment_reference=row.payment_reference,
        payment_method=row.payment_method,
        created_at=row.created_at,
        updated_at=row.updated_at,
        completed_at=row.completed_at,
        items=tuple(item_to_domain(item) for item in items),
    )


def booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=str(row.id),
        user_id=row.user_id,
        event_id=CatalogItemId(row.event_id),
        order_id=OrderId(row.order_id),
        status=row.status,
        attendees=row.attendees,
        created_at=row.created_at,
        event_title=row.event.title,
        event_starts_at=row.event.starts_at,
        venue_name=row.event.venue_name,
    )


def created_between(prefix: str, created_from: datetime | None, created_to: datetime | None) -> dict:
    filters = {}
    if created_from is not None:
        filters[f"{prefix}created_at__gte"] = created_from
    if created_to is not None:
        filters[f"{prefix}created_at__lte"] = created_to
    return filters


class DjangoOrderStore(OrderStore):
    """PostgreSQL-backed order store using Django ORM."""

    def atomic(self):
        return transaction.atomic()

    def user_exists(self, user_id: int) -> bool:
        return get_user_model().objects.filter(pk=user_id, is_active=True).exists()

    def is_staff(self, user_id: int) -> bool:
        return get_user_model().objects.filter(pk=user_id, is_staff=True).exists()

    def insert_order(self, user_id: int, totals: Totals, lines: list[NewOrderLine]) -> Order:
        row = orm.Order.objects.create(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            subtotal_cents=totals.subtotal,
            tax_cents=totals.tax,
            total_cents=totals.total,
        )
        items = orm.OrderItem.objects.bulk_create(
            [
                orm.OrderItem(
                    order=row,
                    item_type=line.item_type.value,
                    item_id=line.item_id.value,
                    title=line.title,
                    unit_price_cents=line.unit_price.amount,
                    quantity=line.quantity,
                    position=position,
                )
                for position, line in enumerate(lines)
            ]
        )
        return order_to_domain(row, items)

    def _load(self, queryset, order_id: OrderId) -> Order | None:
        try:
            row = queryset.get(pk=order_id.value)
        except orm.Order.DoesNotExist:
            return None
        return order_to_domain(row, orm.OrderItem.objects.filter(order_id=row.pk))

    def get_order(self, order_id: OrderId) -> Order | None:
        return self._load(orm.Order.objects.all(), order_id)

    def get_order_for_update(self, order_id: OrderId) -> Order | None:
        return self._load(orm.Order.objects.select_for_update(), order_id)

    def find_by_payment_reference(self, payment_reference: str) -> Order | None:
        row = orm.Order.objects.filter(payment_reference=payment_reference).only("id").first()
        return self.get_order(OrderId(row.id)) if row is not None else None

    def list_user_orders(
        self,
        user_id: int,
        offset: int,
        limit: int,
        status: OrderStatus | None = None,
    ) -> tuple[list[Order], int]:
        queryset = orm.Order.objects.filter(user_id=user_id)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        total = queryset.count()
        rows = queryset.order_by("-created_at").prefetch_related("items")[offset : offset + limit]
        return [order_to_domain(row, row.items.all()) for row in rows], total

    def search_orders(
        self,
        offset: int,
        limit: int,
        query: str = "",
        status: OrderStatus | None = None,
        item_type: ItemType | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> tuple[list[Order], int]:
        queryset = orm.Order.objects.filter(**created_between("", created_from, created_to))
        if query:
            queryset = queryset.filter(Q(id__icontains=query) | Q(user__email__icontains=query))
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if item_type is not None:
            queryset = queryset.filter(items__item_type=item_type.value).distinct()
        total = queryset.count()
        rows = queryset.order_by("-created_at").prefetch_related("items")[offset : offset + limit]
        return [order_to_domain(row, row.items.all()) for row in rows], total

    def order_stats(self, created_from: datetime | None = None, created_to: datetime | None = None) -> OrderStats:
        orders = orm.Order.objects.filter(**created_between("", created_from, created_to))
        completed = orders.filter(status=OrderStatus.COMPLETED.value).aggregate(
            revenue=Sum("total_cents"),
            count=Count("id"),
        )
        by_status = dict(orders.order_by().values_list("status").annotate(count=Count("id")))
        top_rows = (
            orm.OrderItem.objects.filter(
                order__status=OrderStatus.COMPLETED.value,
                **created_between("order__", created_from, created_to),
            )
            .values("item_type", "item_id", "title")
            .annotate(total_quantity=Sum("quantity"), total_revenue=Sum(F("unit_price_cents") * F("quantity")))
            .order_by("-total_revenue", "title")[:10]
        )
        return OrderStats(
            total_revenue=completed["revenue"] or 0,
            order_count=completed["count"],
            orders_by_status=by_status,
            top_items=tuple(
                TopItem(
                    item_type=ItemType(row["item_type"]),
                    item_id=CatalogItemId(row["item_id"]),
                    title=row["title"],
                    total_quantity=row["total_quantity"],
                    total_revenue=row["total_revenue"],
                )
                for row in top_rows
            ),
        )

    def set_status(self, order_id: OrderId, status: OrderStatus, completed_at: datetime | None = None) -> None:
        fields = {"status": status.value, "updated_at": timezone.now()}
        if completed_at is not None:
            fields["completed_at"] = completed_at
        orm.Order.objects.filter(pk=order_id.value).update(**fields)

    def set_payment_reference(
        self,
        order_id: OrderId,
        payment_reference: str,
        payment_method: str,
        status: OrderStatus,
    ) -> None:
        try:
            with transaction.atomic():
                orm.Order.objects.filter(pk=order_id.value).update(
                    payment_reference=payment_reference,
                    payment_method=payment_method,
                    status=status.value,
                    updated_at=timezone.now(),
                )
        except IntegrityError:
            raise ConflictError("Payment reference is already attached to another order") from None

    def grant_enrollment(self, user_id: int, course_id: CatalogItemId, order_item_id: str) -> bool:
        _, created = orm.CourseEnrollment.objects.get_or_create(
            user_id=user_id,
            course_id=course_id.value,
            defaults={"order_item_id": order_item_id},
        )
        return created

    def revoke_enrollment(self, user_id: int, course_id: CatalogItemId, order_item_id: str) -> bool:
        enrollment = orm.CourseEnrollment.objects.filter(
            user_id=user_id,
            course_id=course_id.value,
            order_item_id=order_item_id,
        ).first()
        if enrollment is None:
            return False
        still_paid = (
            orm.OrderItem.objects.filter(
                order__user_id=user_id,
                order__status=OrderStatus.COMPLETED.value,
                item_type=ItemType.COURSE.value,
                item_id=course_id.value,
            )
            .exclude(pk=order_item_id)
            .order_by("order__completed_at")
            .first()
        )
        if still_paid is not None:
            enrollment.order_item = still_paid
            enrollment.save(update_fields=["order_item"])
            return False
        enrollment.delete()
        return True

    def create_booking(
        self,
        user_id: int,
        event_id: CatalogItemId,
        order_id: OrderId,
        order_item_id: str,
        attendees: int,
    ) -> bool:
        _, created = orm.Booking.objects.get_or_create(
            order_item_id=order_item_id,
            defaults={
                "user_id": user_id,
                "event_id": event_id.value,
                "order_id": order_id.value,
                "attendees": attendees,
                "status": orm.Booking.Status.CONFIRMED,
            },
        )
        return created

    def cancel_booking(self, order_item_id: str) -> bool:
        updated = orm.Booking.objects.filter(
            order_item_id=order_item_id,
            status=orm.Booking.Status.CONFIRMED,
        ).update(status=orm.Booking.Status.CANCELLED, updated_at=timezone.now())
        return updated > 0

    def list_user_bookings(self, user_id: int, status: str | None = None) -> list[Booking]:
        rows = orm.Booking.objects.filter(user_id=user_id).select_related("event")
        if status is not None:
            rows = rows.filter(status=status)
        return [booking_to_domain(row) for row in rows.order_by("event__starts_at", "created_at")]

    def get_booking(self, booking_id: UUID) -> Booking | None:
        row = orm.Booking.objects.select_related("event").filter(pk=booking_id).first()
        return booking_to_domain(row) if row is not None else None

    def grant_download(self, user_id: int, product_id: CatalogItemId, order_item_id: str) -> bool:
        limit = (
            catalog_orm.DigitalProduct.objects.filter(pk=product_id.value)
            .values_list("download_limit", flat=True)
            .first()
        )
        _, created = orm.DownloadGrant.objects.get_or_create(
            order_item_id=order_item_id,
            defaults={
                "user_id": user_id,
                "product_id": product_id.value,
                "download_limit": limit if limit is not None else 3,
            },
        )
        return created

    def revoke_download(self, order_item_id: str) -> bool:
        updated = orm.DownloadGrant.objects.filter(
            order_item_id=order_item_id,
            revoked_at__isnull=True,
        ).update(revoked_at=timezone.now())
        return updated > 0
