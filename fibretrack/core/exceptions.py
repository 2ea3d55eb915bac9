"""
Custom exceptions for the Fibre Tracker deadline engine.
Provides meaningful error types for different failure scenarios.
"""
from typing import Any, Optional


class FibreTrackException(Exception):
    """Base exception for all Fibre Tracker errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(FibreTrackException):
    """Raised when engine input violates an invariant (unknown phase, negative duration, bad date)."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details, status_code=422)


class ConfigurationError(FibreTrackException):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        config_key: str,
        actual_value: Optional[str] = None
    ):
        details = {
            "config_key": config_key
        }
        if actual_value:
            details["actual_value"] = actual_value[:50] if len(str(actual_value)) > 50 else actual_value

        super().__init__(message, details, status_code=500)


class CalendarError(FibreTrackException):
    """Raised when a business-day walk cannot complete."""

    def __init__(
        self,
        message: str,
        country_code: Optional[str] = None,
        status_code: int = 500
    ):
        details = {}
        if country_code:
            details["country_code"] = country_code
        super().__init__(message, details, status_code=status_code)


class UnknownCalendarError(CalendarError):
    """Raised when no holiday calendar is registered for a country code."""

    def __init__(self, country_code: str):
        super().__init__(
            f"No holiday calendar registered for country '{country_code}'",
            country_code=country_code,
            status_code=400
        )


class DeadlineCalculationError(FibreTrackException):
    """Raised when the deadline chain cannot be computed consistently."""

    def __init__(
        self,
        message: str,
        phase: Optional[str] = None,
        details: Optional[dict[str, Any]] = None
    ):
        details = dict(details or {})
        if phase:
            details["phase"] = phase
        super().__init__(message, details, status_code=500)


class UnresolvedMirrorError(DeadlineCalculationError):
    """
    Raised when a mirror phase is reached before its source has a deadline.

    Mirrors always follow their source in the phase sequence, so this
    means the phase-order configuration is corrupted.
    """

    def __init__(self, phase: str, source: str):
        super().__init__(
            f"Mirror phase '{phase}' reached before source phase '{source}' has a deadline",
            phase=phase,
            details={"source_phase": source}
        )


class PhaseStateError(FibreTrackException):
    """Raised when a phase completion change conflicts with its current state."""

    def __init__(self, message: str, phase: str):
        super().__init__(message, {"phase": phase}, status_code=409)
