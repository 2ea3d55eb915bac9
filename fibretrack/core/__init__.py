# Core modules - Config, Exceptions
from .config import settings, get_settings
from .exceptions import (
    FibreTrackException,
    ValidationError,
    ConfigurationError,
    CalendarError,
    UnknownCalendarError,
    DeadlineCalculationError,
    UnresolvedMirrorError,
    PhaseStateError,
)

__all__ = [
    "settings",
    "get_settings",
    "FibreTrackException",
    "ValidationError",
    "ConfigurationError",
    "CalendarError",
    "UnknownCalendarError",
    "DeadlineCalculationError",
    "UnresolvedMirrorError",
    "PhaseStateError",
]
