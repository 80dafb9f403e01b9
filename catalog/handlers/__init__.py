from catalog.handlers.views import AvailabilityView

__all__ = ["AvailabilityView"]
