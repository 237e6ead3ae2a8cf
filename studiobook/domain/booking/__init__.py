"""Booking domain - two-step project/event builder with availability-aware assignment"""

from .availability import AvailabilityResolver
from .builder import DraftBookingBuilder, WizardStep
from .errors import ErrorMap, EventFieldScope, FieldScope, GlobalScope

__all__ = [
    "AvailabilityResolver",
    "DraftBookingBuilder",
    "WizardStep",
    "ErrorMap",
    "EventFieldScope",
    "FieldScope",
    "GlobalScope",
]
