# Services - Business Logic Layer
"""
Fibre Tracker Services Module.

This module provides the deadline engine:
- Holiday calendars and business day checks
- Business day arithmetic
- Phase deadline recalculation (full and targeted)
- Project update resolution and status roll-up
"""

# Holiday Calendars
from .holidays import (
    HolidayCalendar,
    FixedHoliday,
    EasterHoliday,
    HolidayEntry,
    SOUTH_AFRICA,
    register_calendar,
    get_calendar,
    available_calendars,
    holidays_for_year,
    is_holiday,
    is_business_day,
    is_weekend,
)

# Business Day Calculations
from .business_days import (
    add_business_days,
    subtract_business_days,
    get_business_days_between,
    get_business_days_until,
    local_today,
    to_local_date,
)

# Phase Configuration
from .phase_config import (
    PHASE_ORDER,
    MIRROR_PHASES,
    SKIPPABLE_PHASE,
    PHASE_DISPLAY_NAMES,
    DEFAULT_ALLOWED_DAYS,
    PhaseConfiguration,
    DEFAULT_PHASE_CONFIG,
    parse_phase_name,
)

# Deadline Engine
from .recalculation.engine import (
    DeadlineEngine,
    get_deadline_engine,
)

# Project Updates
from .project_updates import (
    ProjectSnapshot,
    PhaseUpdate,
    ProjectUpdate,
    UpdateOutcome,
    build_allowed_days,
    resolve_project_update,
)

# Status
from .phase_status import (
    PhaseState,
    classify_deadline,
    classify_phase_urgency,
    get_project_status,
    phases_needing_attention,
    mark_phase_complete,
    reopen_phase,
)


__all__ = [
    # Holidays
    "HolidayCalendar",
    "FixedHoliday",
    "EasterHoliday",
    "HolidayEntry",
    "SOUTH_AFRICA",
    "register_calendar",
    "get_calendar",
    "available_calendars",
    "holidays_for_year",
    "is_holiday",
    "is_business_day",
    "is_weekend",

    # Business Days
    "add_business_days",
    "subtract_business_days",
    "get_business_days_between",
    "get_business_days_until",
    "local_today",
    "to_local_date",

    # Phase Configuration
    "PHASE_ORDER",
    "MIRROR_PHASES",
    "SKIPPABLE_PHASE",
    "PHASE_DISPLAY_NAMES",
    "DEFAULT_ALLOWED_DAYS",
    "PhaseConfiguration",
    "DEFAULT_PHASE_CONFIG",
    "parse_phase_name",

    # Deadline Engine
    "DeadlineEngine",
    "get_deadline_engine",

    # Project Updates
    "ProjectSnapshot",
    "PhaseUpdate",
    "ProjectUpdate",
    "UpdateOutcome",
    "build_allowed_days",
    "resolve_project_update",

    # Status
    "PhaseState",
    "classify_deadline",
    "classify_phase_urgency",
    "get_project_status",
    "phases_needing_attention",
    "mark_phase_complete",
    "reopen_phase",
]
