"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Catalog rows are owned by the admin; the order core only touches the
enrollment, booking and download counters.
"""

import uuid

from django.db import models


class CatalogItem(models.Model):
    """Fields shared by every purchasable catalog entry."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True)
    price_cents = models.PositiveIntegerField()
    is_published = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title


class Course(CatalogItem):
    """Persistence model for courses."""

    enrollment_count = models.PositiveIntegerField(default=0)


class Event(CatalogItem):
    """Persistence model for events with limited seats."""

    starts_at = models.DateTimeField()
    venue_name = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField()
    booked_count = models.PositiveIntegerField(default=0)

    class Meta(CatalogItem.Meta):
        indexes = [
            models.Index(fields=["starts_at"], name="catalog_event_starts_at_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(booked_count__lte=models.F("capacity")),
                name="event_booked_within_capacity",
            ),
        ]


class DigitalProduct(CatalogItem):
    """Persistence model for downloadable products."""

    file_url = models.URLField(max_length=500, blank=True)
    download_limit = models.PositiveIntegerField(default=3)
    download_count = models.PositiveIntegerField(default=0)
