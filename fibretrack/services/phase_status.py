"""
Phase and Project Status for Fibre Tracker.

Maps "business days until deadline" onto status labels for consumers:
- Notifications: overdue (<0), urgent (0-1), warning (2-3), nothing otherwise
- Project detail badges: same, plus on_track (>3)
- Project roll-up: complete / overdue / at_risk / on_track

Also keeps mirror phases' completion in step with their source
(completing build completes fqa; completing rfa completes com).
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

from fibretrack.core.config import settings
from fibretrack.core.exceptions import PhaseStateError
from fibretrack.models.enums import DeadlineStatus, PhaseName, ProjectStatus
from fibretrack.services.business_days import get_business_days_until, local_today, to_local_date
from fibretrack.services.phase_config import DEFAULT_PHASE_CONFIG, PhaseConfiguration, parse_phase_name


logger = logging.getLogger(__name__)


@dataclass
class PhaseState:
    """One phase of a project as the service layer stores it."""
    name: PhaseName
    allowed_days: int
    deadline: Optional[date]
    is_complete: bool = False
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        self.name = parse_phase_name(self.name)
        if self.deadline is not None:
            self.deadline = to_local_date(self.deadline)


def classify_deadline(days_until: int) -> Optional[DeadlineStatus]:
    """
    Notification threshold set.

    Returns None when the deadline is far enough away to need no notice.
    """
    if days_until < 0:
        return DeadlineStatus.OVERDUE
    if days_until <= 1:
        return DeadlineStatus.URGENT
    if days_until <= 3:
        return DeadlineStatus.WARNING
    return None


def classify_phase_urgency(days_until: int) -> DeadlineStatus:
    """Badge threshold set: like classify_deadline but never empty."""
    return classify_deadline(days_until) or DeadlineStatus.ON_TRACK


def _is_tracked(phase: PhaseState, config: PhaseConfiguration) -> bool:
    """Open phases that can still be late (skipped phase has no real deadline)."""
    return (
        not phase.is_complete
        and phase.deadline is not None
        and not config.is_skipped(phase.name, phase.allowed_days)
    )


def get_project_status(
    phases: Iterable[PhaseState],
    today: Optional[Any] = None,
    country_code: Optional[str] = None,
    phase_config: PhaseConfiguration = DEFAULT_PHASE_CONFIG
) -> ProjectStatus:
    """
    Roll a project's phases up into one status.

    - COMPLETE: every counted phase is complete (mirrors and a skipped
      wayleave are not counted)
    - OVERDUE: any open phase is past its deadline
    - AT_RISK: any open phase is due within the warning threshold
    - ON_TRACK: otherwise
    """
    phases = list(phases)
    reference = to_local_date(today) if today is not None else local_today()

    allowed_days = {phase.name: phase.allowed_days for phase in phases}
    counted = set(phase_config.counted_phases(allowed_days))
    counted_phases = [phase for phase in phases if phase.name in counted]

    if counted_phases and all(phase.is_complete for phase in counted_phases):
        return ProjectStatus.COMPLETE

    status = ProjectStatus.ON_TRACK
    for phase in phases:
        if not _is_tracked(phase, phase_config):
            continue

        days_until = get_business_days_until(phase.deadline, today=reference, country_code=country_code)
        if days_until < 0:
            return ProjectStatus.OVERDUE
        if days_until <= settings.status_warning_threshold_days:
            status = ProjectStatus.AT_RISK

    return status


def phases_needing_attention(
    phases: Iterable[PhaseState],
    today: Optional[Any] = None,
    country_code: Optional[str] = None,
    phase_config: PhaseConfiguration = DEFAULT_PHASE_CONFIG
) -> list[tuple[PhaseState, int, DeadlineStatus]]:
    """Open phases that warrant a notification, with days-until and status."""
    reference = to_local_date(today) if today is not None else local_today()
    flagged = []

    for phase in phases:
        if not _is_tracked(phase, phase_config):
            continue
        days_until = get_business_days_until(phase.deadline, today=reference, country_code=country_code)
        status = classify_deadline(days_until)
        if status is not None:
            flagged.append((phase, days_until, status))

    return flagged


def _find(phases: list[PhaseState], name: PhaseName) -> PhaseState:
    for phase in phases:
        if phase.name == name:
            return phase
    raise PhaseStateError(f"Phase '{name.value}' not found in project", phase=name.value)


def mark_phase_complete(
    phases: list[PhaseState],
    name: Any,
    user_id: str,
    completed_at: datetime,
    phase_config: PhaseConfiguration = DEFAULT_PHASE_CONFIG
) -> list[PhaseState]:
    """
    Complete a phase in place; completing a source also completes its mirrors.

    Returns the phases that changed.
    """
    phase = _find(phases, parse_phase_name(name))
    if phase.is_complete:
        raise PhaseStateError(f"Phase '{phase.name.value}' is already complete", phase=phase.name.value)

    changed = [phase]
    changed.extend(
        _find(phases, mirror) for mirror, source in phase_config.mirrors.items()
        if source == phase.name
    )

    for target in changed:
        target.is_complete = True
        target.completed_by = user_id
        target.completed_at = completed_at

    logger.info(f"Phase {phase.name.value} completed by {user_id} ({len(changed)} phase(s) updated)")
    return changed


def reopen_phase(
    phases: list[PhaseState],
    name: Any,
    phase_config: PhaseConfiguration = DEFAULT_PHASE_CONFIG
) -> list[PhaseState]:
    """Undo completion in place; reopening a source also reopens its mirrors."""
    phase = _find(phases, parse_phase_name(name))
    if not phase.is_complete:
        raise PhaseStateError(f"Phase '{phase.name.value}' is not complete", phase=phase.name.value)

    changed = [phase]
    changed.extend(
        _find(phases, mirror) for mirror, source in phase_config.mirrors.items()
        if source == phase.name
    )

    for target in changed:
        target.is_complete = False
        target.completed_by = None
        target.completed_at = None

    return changed
