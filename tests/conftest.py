"""Pytest configuration and shared fixtures."""

from datetime import timedelta
from itertools import count

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from cart.services import get_cart_service
from catalog.models import Course, DigitalProduct, Event
from orders.services import get_order_service

_slugs = count(1)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_course():
    def factory(**overrides) -> Course:
        fields = {
            "title": "Mindful Breathing",
            "slug": f"course-{next(_slugs)}",
            "price_cents": 5999,
            "is_published": True,
        }
        fields.update(overrides)
        return Course.objects.create(**fields)

    return factory


@pytest.fixture
def make_event():
    def factory(**overrides) -> Event:
        fields = {
            "title": "Full Moon Retreat",
            "slug": f"event-{next(_slugs)}",
            "price_cents": 14999,
            "is_published": True,
            "starts_at": timezone.now() + timedelta(days=14),
            "capacity": 10,
        }
        fields.update(overrides)
        return Event.objects.create(**fields)

    return factory


@pytest.fixture
def make_product():
    def factory(**overrides) -> DigitalProduct:
        fields = {
            "title": "Guided Meditation Pack",
            "slug": f"product-{next(_slugs)}",
            "price_cents": 1999,
            "is_published": True,
        }
        fields.update(overrides)
        return DigitalProduct.objects.create(**fields)

    return factory


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="seeker", email="seeker@example.com", password="pw")


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="pilgrim", email="pilgrim@example.com", password="pw")


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(
        username="keeper", email="keeper@example.com", password="pw", is_staff=True
    )


@pytest.fixture
def cart_service():
    return get_cart_service()


@pytest.fixture
def order_service():
    return get_order_service()
