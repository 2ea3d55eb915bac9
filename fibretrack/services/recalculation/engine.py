"""
Deadline Recalculation Engine for Fibre Tracker.

This engine handles:
1. Full calculation of every phase deadline from the site-survey (anchor) date
2. Recalculation after an anchor change or a duration change (full pass)
3. Targeted recalculation after a direct deadline override (downstream suffix only)
4. Mirror phases (fqa = build, com = rfa) and the skippable wayleave phase

The engine is pure: same inputs, same outputs, no I/O. Results are built on
a copy and only returned once complete, so callers never see a half-updated
phase set.
"""
import logging
from datetime import date
from typing import Any, Optional

from fibretrack.core.exceptions import UnresolvedMirrorError, ValidationError
from fibretrack.models.enums import PhaseName
from fibretrack.services.business_days import (
    add_business_days,
    get_business_days_until,
    to_local_date,
)
from fibretrack.services.holidays import get_calendar
from fibretrack.services.phase_config import (
    DEFAULT_PHASE_CONFIG,
    PhaseConfiguration,
    parse_phase_name,
    phase_names,
)


logger = logging.getLogger(__name__)


Deadlines = dict[PhaseName, date]


class DeadlineEngine:
    """
    The Deadline Engine walks the phase chain in sequence order:

    1. Mirror phase: copy the source phase's deadline (cursor stays put)
    2. Skipped phase (wayleave with 0 days): no deadline (cursor stays put)
    3. Any other phase: deadline = cursor + allowed_days business days,
       then the cursor moves to that deadline

    Full passes start the cursor at the anchor date. Override passes start
    it at the overridden deadline and only touch phases after it.
    """

    def __init__(
        self,
        country_code: Optional[str] = None,
        phase_config: PhaseConfiguration = DEFAULT_PHASE_CONFIG
    ):
        """
        Initialize the Deadline Engine.

        Args:
            country_code: Holiday calendar to use (settings default if not provided)
            phase_config: Phase order, mirror table and skippable phase
        """
        # Resolve now so an unknown country fails at construction
        self.calendar = get_calendar(country_code)
        self.country_code = self.calendar.country_code
        self.phase_config = phase_config

    # ==========================================
    # PUBLIC OPERATIONS
    # ==========================================

    def compute_initial_deadlines(self, anchor_date: Any, durations: dict) -> Deadlines:
        """Deadlines for a new project, chained from the site-survey date."""
        return self._full_pass(anchor_date, durations, reason="initial")

    def recalculate_from_anchor_change(self, new_anchor_date: Any, durations: dict) -> Deadlines:
        """Site-survey date moved: every deadline is re-derived."""
        return self._full_pass(new_anchor_date, durations, reason="anchor change")

    def recalculate_from_duration_change(self, durations: dict, anchor_date: Any) -> Deadlines:
        """
        One or more allowed_days changed.

        A duration change shifts everything downstream of it, and the chain
        is short, so this is the same full pass as an anchor change.
        """
        return self._full_pass(anchor_date, durations, reason="duration change")

    def recalculate_from_deadline_override(
        self,
        changed_phase: Any,
        new_deadline: Any,
        durations: dict,
        current_deadlines: dict
    ) -> Deadlines:
        """
        A phase's deadline was set directly.

        - The changed phase (and its mirror partners) take the new deadline
        - Every phase after it is re-chained from the new deadline
        - Phases before it keep their current deadlines

        Args:
            changed_phase: Phase whose deadline was set
            new_deadline: The deadline it was set to
            durations: allowed_days per phase
            current_deadlines: Deadlines before the override

        Returns:
            Complete deadline mapping (skipped phase absent)
        """
        config = self.phase_config
        phase = parse_phase_name(changed_phase)
        anchor = to_local_date(new_deadline)
        allowed_days = config.normalize_durations(durations)

        if config.is_skipped(phase, allowed_days[phase]):
            raise ValidationError(
                f"Cannot set a deadline on skipped phase '{phase.value}'; give it allowed days first",
                field="deadline",
                value=phase.value
            )

        deadlines = self._normalize_deadlines(current_deadlines)
        # A skipped phase carries no deadline, upstream of the change or not
        for skipped in [p for p in deadlines if config.is_skipped(p, allowed_days.get(p, 0))]:
            deadlines.pop(skipped)
        deadlines[phase] = anchor

        for partner in config.mirror_partners(phase):
            deadlines[partner] = anchor

        downstream = config.phases_after(phase)
        self._chain(downstream, anchor, allowed_days, deadlines)

        logger.info(
            f"Deadline override on {phase.value} -> {anchor.isoformat()}; "
            f"recalculated {len(downstream)} downstream phases"
        )
        return self._ordered(deadlines)

    def days_until_deadline(self, deadline: Any, today: Optional[Any] = None) -> int:
        """Business days until the deadline (negative when overdue)."""
        return get_business_days_until(deadline, today=today, country_code=self.country_code)

    # ==========================================
    # INTERNALS
    # ==========================================

    def _full_pass(self, anchor_date: Any, durations: dict, reason: str) -> Deadlines:
        anchor = to_local_date(anchor_date)
        allowed_days = self.phase_config.normalize_durations(durations)

        deadlines: Deadlines = {}
        self._chain(self.phase_config.sequence, anchor, allowed_days, deadlines)

        logger.debug(
            f"Full deadline pass ({reason}) from {anchor.isoformat()}: "
            f"{len(deadlines)} phases dated"
        )
        return self._ordered(deadlines)

    def _chain(
        self,
        phases: tuple[PhaseName, ...],
        cursor: date,
        allowed_days: dict[PhaseName, int],
        deadlines: Deadlines
    ) -> None:
        """Assign deadlines to `phases` in order, chaining from `cursor` (mutates deadlines)."""
        config = self.phase_config

        for phase in phases:
            source = config.source_of(phase)
            if source is not None:
                if source not in deadlines:
                    raise UnresolvedMirrorError(phase.value, source.value)
                deadlines[phase] = deadlines[source]
                continue

            if config.is_skipped(phase, allowed_days[phase]):
                # Drop any stale deadline left from before the phase was skipped
                deadlines.pop(phase, None)
                continue

            deadline = add_business_days(cursor, allowed_days[phase], self.country_code)
            deadlines[phase] = deadline
            cursor = deadline

    def _normalize_deadlines(self, current_deadlines: dict) -> Deadlines:
        normalized: Deadlines = {}
        for raw_name, raw_deadline in (current_deadlines or {}).items():
            if raw_deadline is None:
                continue
            normalized[parse_phase_name(raw_name)] = to_local_date(raw_deadline)
        return normalized

    def _ordered(self, deadlines: Deadlines) -> Deadlines:
        return {
            phase: deadlines[phase]
            for phase in self.phase_config.sequence
            if phase in deadlines
        }


_default_engine: Optional[DeadlineEngine] = None


def get_deadline_engine() -> DeadlineEngine:
    """Shared engine for the default calendar and phase configuration."""
    global _default_engine
    if _default_engine is None:
        _default_engine = DeadlineEngine()
        logger.info(
            f"Deadline engine ready: calendar={_default_engine.country_code}, "
            f"phases={','.join(phase_names(_default_engine.phase_config.sequence))}"
        )
    return _default_engine
