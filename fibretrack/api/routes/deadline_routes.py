"""
Deadline API Routes for Fibre Tracker.

Stateless endpoints over the deadline engine. The project service
sends the current phase state and persists what comes back; nothing is
stored here.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from fibretrack.models.enums import PhaseName, RecalculationTrigger
from fibretrack.models.schemas import (
    DeadlinesResponse,
    InitialDeadlinesRequest,
    PhaseDeadline,
    PhaseStatusOut,
    RecalculateRequest,
    StatusRequest,
    StatusResponse,
)
from fibretrack.services.business_days import add_business_days, local_today
from fibretrack.services.phase_config import PHASE_DISPLAY_NAMES
from fibretrack.services.phase_status import (
    PhaseState,
    classify_phase_urgency,
    get_project_status,
)
from fibretrack.services.project_updates import (
    PhaseUpdate,
    ProjectSnapshot,
    ProjectUpdate,
    build_allowed_days,
    resolve_project_update,
)
from fibretrack.services.recalculation.engine import get_deadline_engine


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/deadlines", tags=["Deadlines"])


def _phase_rows(
    allowed_days: dict[PhaseName, int],
    deadlines: dict[PhaseName, date]
) -> list[PhaseDeadline]:
    config = get_deadline_engine().phase_config
    return [
        PhaseDeadline(
            phase_name=phase,
            display_name=PHASE_DISPLAY_NAMES.get(phase, phase.value),
            allowed_days=allowed_days.get(phase, 0),
            deadline=deadlines.get(phase),
            is_mirror=config.is_mirror(phase),
            is_skipped=config.is_skipped(phase, allowed_days.get(phase, 0))
        )
        for phase in config.sequence
    ]


@router.get(
    "/defaults",
    summary="Phase Configuration",
    description="Phase order, mirrors, skippable phase and default durations"
)
async def get_phase_defaults() -> dict:
    config = get_deadline_engine().phase_config
    defaults = build_allowed_days()

    return {
        "phases": [
            {
                "phase_name": phase.value,
                "display_name": PHASE_DISPLAY_NAMES.get(phase, phase.value),
                "default_allowed_days": defaults[phase],
                "mirror_of": config.source_of(phase).value if config.is_mirror(phase) else None,
            }
            for phase in config.sequence
        ],
        "skippable_phase": config.skippable.value if config.skippable else None,
    }


@router.post(
    "/initial",
    summary="Initial Deadlines",
    description="Compute every phase deadline for a new project",
    response_model=DeadlinesResponse
)
async def compute_initial_deadlines(body: InitialDeadlinesRequest) -> DeadlinesResponse:
    engine = get_deadline_engine()
    allowed_days = build_allowed_days(overrides=body.allowed_days)
    deadlines = engine.compute_initial_deadlines(body.site_survey_date, allowed_days)

    return DeadlinesResponse(
        site_survey_date=body.site_survey_date,
        trigger=RecalculationTrigger.INITIAL,
        phases=_phase_rows(allowed_days, deadlines)
    )


@router.post(
    "/recalculate",
    summary="Recalculate Deadlines",
    description="Apply a project edit (anchor, durations, deadline overrides) and recalculate",
    response_model=DeadlinesResponse
)
async def recalculate_deadlines(body: RecalculateRequest) -> DeadlinesResponse:
    snapshot = ProjectSnapshot(
        anchor_date=body.site_survey_date,
        allowed_days={phase.phase_name: phase.allowed_days for phase in body.phases},
        deadlines={
            phase.phase_name: phase.deadline
            for phase in body.phases
            if phase.deadline is not None
        }
    )
    update = ProjectUpdate(
        anchor_date=body.new_site_survey_date,
        phases=[
            PhaseUpdate(
                phase_name=change.phase_name,
                allowed_days=change.allowed_days,
                deadline=change.deadline
            )
            for change in body.changes
        ]
    )

    outcome = resolve_project_update(snapshot, update, body.allow_deadline_overrides)

    return DeadlinesResponse(
        site_survey_date=outcome.anchor_date,
        trigger=outcome.trigger,
        start_phase=outcome.start_phase,
        phases=_phase_rows(outcome.allowed_days, outcome.deadlines),
        ignored_overrides=outcome.ignored_overrides
    )


@router.post(
    "/status",
    summary="Deadline Status",
    description="Business days until each deadline, urgency, and project roll-up",
    response_model=StatusResponse
)
async def get_deadline_status(body: StatusRequest) -> StatusResponse:
    engine = get_deadline_engine()
    config = engine.phase_config
    # One "today" for the whole response
    today = local_today()

    phases = [
        PhaseState(
            name=phase.phase_name,
            allowed_days=phase.allowed_days,
            deadline=phase.deadline,
            is_complete=phase.is_complete,
            completed_by=phase.completed_by,
            completed_at=phase.completed_at
        )
        for phase in body.phases
    ]

    rows = []
    for phase in phases:
        days_until = None
        status = None
        if phase.deadline is not None and not config.is_skipped(phase.name, phase.allowed_days):
            days_until = engine.days_until_deadline(phase.deadline, today=today)
            status = None if phase.is_complete else classify_phase_urgency(days_until)
        rows.append(PhaseStatusOut(
            phase_name=phase.name,
            deadline=phase.deadline,
            is_complete=phase.is_complete,
            days_until_deadline=days_until,
            status=status
        ))

    counted = set(config.counted_phases({phase.name: phase.allowed_days for phase in phases}))

    return StatusResponse(
        today=today,
        project_status=get_project_status(phases, today=today, country_code=engine.country_code),
        completed_phases=sum(1 for phase in phases if phase.name in counted and phase.is_complete),
        total_phases=sum(1 for phase in phases if phase.name in counted),
        phases=rows
    )


@router.get(
    "/business-days",
    summary="Add Business Days",
    description="Date that is N business days after a start date"
)
async def get_business_day_offset(
    start: date = Query(..., description="Start date (not counted)"),
    days: int = Query(..., ge=0, le=3650, description="Business days to add"),
    country_code: Optional[str] = Query(None, description="Country code (default from settings)")
) -> dict:
    result = add_business_days(start, days, country_code)
    return {
        "start": start.isoformat(),
        "days": days,
        "result": result.isoformat(),
        "day_of_week": result.strftime("%A")
    }
