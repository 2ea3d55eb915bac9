"""
Pydantic schemas for request validation and response serialization.
Covers the deadline engine's HTTP surface: holidays, deadlines, status.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .enums import DeadlineStatus, PhaseName, ProjectStatus, RecalculationTrigger


# ==========================================
# HOLIDAY SCHEMAS
# ==========================================

class HolidayOut(BaseModel):
    """A single holiday in a calendar year."""
    holiday_date: date
    name: str
    is_observed: bool = False


class HolidayListResponse(BaseModel):
    country_code: str
    year: int
    holidays: list[HolidayOut]
    count: int


class BusinessDayCheckResponse(BaseModel):
    check_date: date
    day_of_week: str
    is_business_day: bool
    is_weekend: bool
    is_holiday: bool
    holiday_name: Optional[str] = None


# ==========================================
# DEADLINE SCHEMAS
# ==========================================

class PhaseDeadline(BaseModel):
    """Computed deadline for one phase (None when the phase is skipped)."""
    phase_name: PhaseName
    display_name: str
    allowed_days: int
    deadline: Optional[date] = None
    is_mirror: bool = False
    is_skipped: bool = False


class InitialDeadlinesRequest(BaseModel):
    """Create-project input: anchor plus optional per-project durations."""
    site_survey_date: date
    allowed_days: dict[PhaseName, int] = Field(default_factory=dict)

    @field_validator("allowed_days")
    @classmethod
    def validate_days(cls, v: dict[PhaseName, int]) -> dict[PhaseName, int]:
        for phase, days in v.items():
            if days < 0 or days > 365:
                raise ValueError(f"allowed_days for {phase.value} must be between 0 and 365")
        return v


class DeadlinesResponse(BaseModel):
    site_survey_date: date
    trigger: RecalculationTrigger
    start_phase: Optional[PhaseName] = None
    phases: list[PhaseDeadline]
    ignored_overrides: list[PhaseName] = Field(default_factory=list)


class PhaseSnapshot(BaseModel):
    phase_name: PhaseName
    allowed_days: int = Field(..., ge=0, le=365)
    deadline: Optional[date] = None


class PhaseChange(BaseModel):
    phase_name: PhaseName
    allowed_days: Optional[int] = Field(None, ge=0, le=365)
    deadline: Optional[date] = None


class RecalculateRequest(BaseModel):
    """Project edit: current state plus requested changes."""
    site_survey_date: date
    phases: list[PhaseSnapshot] = Field(..., min_length=1)
    new_site_survey_date: Optional[date] = None
    changes: list[PhaseChange] = Field(default_factory=list)
    # Decided upstream (e.g. super-admin role); never inferred here
    allow_deadline_overrides: bool = False


# ==========================================
# STATUS SCHEMAS
# ==========================================

class PhaseStatusInput(BaseModel):
    phase_name: PhaseName
    allowed_days: int = Field(..., ge=0, le=365)
    deadline: Optional[date] = None
    is_complete: bool = False
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None


class StatusRequest(BaseModel):
    phases: list[PhaseStatusInput] = Field(..., min_length=1)


class PhaseStatusOut(BaseModel):
    phase_name: PhaseName
    deadline: Optional[date] = None
    is_complete: bool
    days_until_deadline: Optional[int] = None
    status: Optional[DeadlineStatus] = None


class StatusResponse(BaseModel):
    today: date
    project_status: ProjectStatus
    completed_phases: int
    total_phases: int
    phases: list[PhaseStatusOut]
