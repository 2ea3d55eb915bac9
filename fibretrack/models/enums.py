"""
Enum types for the fibre-installation phase chain.
Phase values match the phase names stored by the project service.
"""
from enum import Enum


class PhaseName(str, Enum):
    """
    Milestone phases of a fibre installation.
    Declaration order IS the global phase sequence.
    """
    PLANNING = "planning"
    FUNDING = "funding"
    WAYLEAVE = "wayleave"          # Right-of-way; skipped when allowed_days == 0
    MATERIALS = "materials"
    ANNOUNCEMENT = "announcement"
    KICKOFF = "kickoff"
    BUILD = "build"
    FQA = "fqa"                    # Mirrors BUILD
    ECC = "ecc"
    INTEGRATION = "integration"
    RFA = "rfa"
    COM = "com"                    # Mirrors RFA


class DeadlineStatus(str, Enum):
    """Urgency of a single phase deadline."""
    OVERDUE = "overdue"
    URGENT = "urgent"
    WARNING = "warning"
    ON_TRACK = "on_track"


class ProjectStatus(str, Enum):
    """Roll-up status of a whole project."""
    COMPLETE = "complete"
    OVERDUE = "overdue"
    AT_RISK = "at_risk"
    ON_TRACK = "on_track"


class RecalculationTrigger(str, Enum):
    """What caused a deadline recalculation."""
    INITIAL = "initial"
    ANCHOR_CHANGE = "anchor_change"
    DURATION_CHANGE = "duration_change"
    DEADLINE_OVERRIDE = "deadline_override"
    NONE = "none"
