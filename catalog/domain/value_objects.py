"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID


class ItemType(str, Enum):
    """Kinds of purchasable catalog entries."""

    COURSE = "course"
    EVENT = "event"
    DIGITAL_PRODUCT = "digital_product"

    @property
    def label(self) -> str:
        return {
            ItemType.COURSE: "Course",
            ItemType.EVENT: "Event",
            ItemType.DIGITAL_PRODUCT: "Digital product",
        }[self]


@dataclass(frozen=True)
class CatalogItemId:
    """Unique identifier for a catalog entry."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")
