# Data models - Enums and Pydantic Schemas
from .enums import (
    PhaseName,
    DeadlineStatus,
    ProjectStatus,
    RecalculationTrigger,
)
from .schemas import (
    HolidayOut,
    HolidayListResponse,
    BusinessDayCheckResponse,
    PhaseDeadline,
    InitialDeadlinesRequest,
    DeadlinesResponse,
    PhaseSnapshot,
    PhaseChange,
    RecalculateRequest,
    PhaseStatusInput,
    StatusRequest,
    PhaseStatusOut,
    StatusResponse,
)

__all__ = [
    # Enums
    "PhaseName",
    "DeadlineStatus",
    "ProjectStatus",
    "RecalculationTrigger",
    # Holiday Schemas
    "HolidayOut",
    "HolidayListResponse",
    "BusinessDayCheckResponse",
    # Deadline Schemas
    "PhaseDeadline",
    "InitialDeadlinesRequest",
    "DeadlinesResponse",
    "PhaseSnapshot",
    "PhaseChange",
    "RecalculateRequest",
    # Status Schemas
    "PhaseStatusInput",
    "StatusRequest",
    "PhaseStatusOut",
    "StatusResponse",
]
