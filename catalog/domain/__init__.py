from catalog.domain.models import CatalogItem, Course, DigitalProduct, Event
from catalog.domain.value_objects import Capacity, CatalogItemId, ItemType

__all__ = [
    "CatalogItem",
    "Course",
    "Event",
    "DigitalProduct",
    "CatalogItemId",
    "ItemType",
    "Capacity",
]
