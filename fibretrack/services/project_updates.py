"""
Project Update Resolution for Fibre Tracker.

Turns one project edit into a single call on the deadline engine.
An edit may carry any mix of:
- a new site-survey (anchor) date
- new allowed_days for some phases
- directly set deadlines (only honoured when the caller may override)

Priority when several are present:
    deadline override > anchor change > duration change > nothing

Deciding who may override deadlines is the caller's job; this module only
receives the answer as `allow_deadline_overrides`.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from fibretrack.core.config import settings
from fibretrack.models.enums import PhaseName, RecalculationTrigger
from fibretrack.services.business_days import to_local_date
from fibretrack.services.phase_config import parse_phase_name
from fibretrack.services.recalculation.engine import DeadlineEngine, get_deadline_engine


logger = logging.getLogger(__name__)


@dataclass
class ProjectSnapshot:
    """Current persisted state of a project's phase chain."""
    anchor_date: date
    allowed_days: dict[PhaseName, int]
    deadlines: dict[PhaseName, date]


@dataclass
class PhaseUpdate:
    """Requested change to one phase."""
    phase_name: Any
    allowed_days: Optional[int] = None
    deadline: Optional[Any] = None


@dataclass
class ProjectUpdate:
    """Requested change to a project (all parts optional)."""
    anchor_date: Optional[Any] = None
    phases: list[PhaseUpdate] = field(default_factory=list)


@dataclass
class UpdateOutcome:
    """State to persist after applying an update."""
    anchor_date: date
    allowed_days: dict[PhaseName, int]
    deadlines: dict[PhaseName, date]
    trigger: RecalculationTrigger
    start_phase: Optional[PhaseName] = None
    ignored_overrides: list[PhaseName] = field(default_factory=list)


def build_allowed_days(
    defaults: Optional[dict[str, int]] = None,
    overrides: Optional[dict[Any, int]] = None,
    engine: Optional[DeadlineEngine] = None
) -> dict[PhaseName, int]:
    """
    Duration table for a new project.

    Starts from the configured defaults, applies per-project overrides,
    and pins mirror phases to 0.
    """
    engine = engine or get_deadline_engine()
    config = engine.phase_config

    table: dict[Any, int] = dict(defaults if defaults is not None else settings.default_allowed_days)
    for raw_name, days in (overrides or {}).items():
        table[parse_phase_name(raw_name)] = days

    table = {parse_phase_name(name): days for name, days in table.items()}
    for phase in config.sequence:
        if config.is_mirror(phase):
            table[phase] = 0

    return config.normalize_durations(table)


def resolve_project_update(
    snapshot: ProjectSnapshot,
    update: ProjectUpdate,
    allow_deadline_overrides: bool,
    engine: Optional[DeadlineEngine] = None
) -> UpdateOutcome:
    """
    Apply an edit to a project snapshot and recalculate deadlines.

    Steps:
    1. Copy the duration table and apply allowed_days changes
    2. Collect deadline overrides (if allowed); the earliest phase in sequence wins
    3. Pick the recalculation mode by priority and run it

    Overrides on phases after the winning one are superseded by the
    downstream recalculation, exactly as if they had been sent one by one
    from the earliest phase.

    Args:
        snapshot: Current anchor, durations and deadlines
        update: Requested changes
        allow_deadline_overrides: Whether the caller may set deadlines directly
        engine: Deadline engine (shared default if not provided)

    Returns:
        UpdateOutcome with everything the caller should persist
    """
    engine = engine or get_deadline_engine()
    config = engine.phase_config

    allowed_days = {parse_phase_name(name): days for name, days in snapshot.allowed_days.items()}
    current_deadlines = {
        parse_phase_name(name): to_local_date(deadline)
        for name, deadline in snapshot.deadlines.items()
        if deadline is not None
    }

    durations_changed = False
    override_phase: Optional[PhaseName] = None
    override_deadline: Optional[date] = None
    ignored: list[PhaseName] = []

    for phase_update in update.phases:
        phase = parse_phase_name(phase_update.phase_name)

        if phase_update.allowed_days is not None:
            if config.is_mirror(phase):
                logger.warning(f"Ignoring allowed_days for mirror phase {phase.value}; mirrors are always 0")
            else:
                allowed_days[phase] = phase_update.allowed_days
                durations_changed = True

        if phase_update.deadline is not None:
            if not allow_deadline_overrides:
                logger.warning(f"Deadline override on {phase.value} ignored: caller may not override deadlines")
                ignored.append(phase)
                continue

            new_deadline = to_local_date(phase_update.deadline)
            if override_phase is None or config.index_of(phase) < config.index_of(override_phase):
                override_phase = phase
                override_deadline = new_deadline

    anchor_changed = update.anchor_date is not None
    anchor = to_local_date(update.anchor_date) if anchor_changed else to_local_date(snapshot.anchor_date)

    if override_phase is not None:
        trigger = RecalculationTrigger.DEADLINE_OVERRIDE
        deadlines = engine.recalculate_from_deadline_override(
            override_phase, override_deadline, allowed_days, current_deadlines
        )
    elif anchor_changed:
        trigger = RecalculationTrigger.ANCHOR_CHANGE
        deadlines = engine.recalculate_from_anchor_change(anchor, allowed_days)
    elif durations_changed:
        trigger = RecalculationTrigger.DURATION_CHANGE
        deadlines = engine.recalculate_from_duration_change(allowed_days, anchor)
    else:
        trigger = RecalculationTrigger.NONE
        deadlines = current_deadlines

    logger.info(
        f"Project update resolved: trigger={trigger.value}"
        + (f", from phase {override_phase.value}" if override_phase else "")
    )

    return UpdateOutcome(
        anchor_date=anchor,
        allowed_days=config.normalize_durations(allowed_days),
        deadlines=deadlines,
        trigger=trigger,
        start_phase=override_phase,
        ignored_overrides=ignored,
    )
