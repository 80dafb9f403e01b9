"""Django ORM implementation of the CatalogStore."""

from django.db.models import F, Value
from django.db.models.functions import Greatest

from catalog import models as orm
from catalog.domain import Capacity, CatalogItem, CatalogItemId, Course, DigitalProduct, Event, ItemType
from catalog.stores.interfaces import CatalogStore
from common.pricing import Money

MODEL_BY_TYPE = {
    ItemType.COURSE: orm.Course,
    ItemType.EVENT: orm.Event,
    ItemType.DIGITAL_PRODUCT: orm.DigitalProduct,
}


def to_domain(item_type: ItemType, row) -> CatalogItem:
    common = dict(
        id=CatalogItemId(row.id),
        item_type=item_type,
        title=row.title,
        price=Money(row.price_cents),
        is_published=row.is_published,
        deleted_at=row.deleted_at,
    )
    if item_type is ItemType.EVENT:
        return Event(
            **common,
            starts_at=row.starts_at,
            capacity=Capacity(row.capacity),
            booked_count=row.booked_count,
        )
    if item_type is ItemType.DIGITAL_PRODUCT:
        return DigitalProduct(
            **common,
            download_limit=row.download_limit,
            download_count=row.download_count,
        )
    return Course(**common, enrollment_count=row.enrollment_count)


class DjangoCatalogStore(CatalogStore):
    """PostgreSQL-backed catalog store using Django ORM."""

    def _live(self, item_type: ItemType):
        return MODEL_BY_TYPE[item_type].objects.filter(deleted_at__isnull=True)

    def get_item(self, item_type: ItemType, item_id: CatalogItemId) -> CatalogItem | None:
        row = self._live(item_type).filter(pk=item_id.value).first()
        return to_domain(item_type, row) if row is not None else None

    def get_item_for_update(self, item_type: ItemType, item_id: CatalogItemId) -> CatalogItem | None:
        row = self._live(item_type).select_for_update().filter(pk=item_id.value).first()
        return to_domain(item_type, row) if row is not None else None

    def reserve_seats(self, event_id: CatalogItemId, seats: int) -> bool:
        updated = (
            self._live(ItemType.EVENT)
            .filter(pk=event_id.value, booked_count__lte=F("capacity") - seats)
            .update(booked_count=F("booked_count") + seats)
        )
        return updated == 1

    def release_seats(self, event_id: CatalogItemId, seats: int) -> None:
        orm.Event.objects.filter(pk=event_id.value).update(
            booked_count=Greatest(F("booked_count") - seats, Value(0))
        )

    def adjust_enrollment_count(self, course_id: CatalogItemId, delta: int) -> None:
        orm.Course.objects.filter(pk=course_id.value).update(
            enrollment_count=Greatest(F("enrollment_count") + delta, Value(0))
        )

    def adjust_download_count(self, product_id: CatalogItemId, delta: int) -> None:
        orm.DigitalProduct.objects.filter(pk=product_id.value).update(
            download_count=Greatest(F("download_count") + delta, Value(0))
        )
