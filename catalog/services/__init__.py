from catalog.services.availability import Availability, AvailabilityChecker, describe_unavailable, evaluate

__all__ = ["Availability", "AvailabilityChecker", "describe_unavailable", "evaluate"]
