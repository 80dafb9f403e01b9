from django.urls import path

from catalog.handlers import AvailabilityView

urlpatterns = [
    path(
        "catalog/<str:item_type>/<str:item_id>/availability",
        AvailabilityView.as_view(),
        name="catalog-availability",
    ),
]
