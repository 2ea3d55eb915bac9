"""
Phase sequence configuration for the deadline engine.

The engine reads four things from here:
- the fixed phase order (12 phases)
- the mirror table (mirror -> source)
- the single skippable phase
- default durations in business days
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from fibretrack.core.exceptions import ConfigurationError, ValidationError
from fibretrack.models.enums import PhaseName


PHASE_ORDER: tuple[PhaseName, ...] = tuple(PhaseName)

MIRROR_PHASES: dict[PhaseName, PhaseName] = {
    PhaseName.FQA: PhaseName.BUILD,
    PhaseName.COM: PhaseName.RFA,
}

SKIPPABLE_PHASE: PhaseName = PhaseName.WAYLEAVE

PHASE_DISPLAY_NAMES: dict[PhaseName, str] = {
    PhaseName.PLANNING: "Planning",
    PhaseName.FUNDING: "Funding",
    PhaseName.WAYLEAVE: "Wayleave",
    PhaseName.MATERIALS: "Materials",
    PhaseName.ANNOUNCEMENT: "Announcement",
    PhaseName.KICKOFF: "Kick-Off",
    PhaseName.BUILD: "Build",
    PhaseName.FQA: "FQA",
    PhaseName.ECC: "ECC",
    PhaseName.INTEGRATION: "Integration",
    PhaseName.RFA: "RFA",
    PhaseName.COM: "COM",
}

DEFAULT_ALLOWED_DAYS: dict[PhaseName, int] = {
    PhaseName.PLANNING: 10,
    PhaseName.FUNDING: 2,
    PhaseName.WAYLEAVE: 20,
    PhaseName.MATERIALS: 15,
    PhaseName.ANNOUNCEMENT: 1,
    PhaseName.KICKOFF: 2,
    PhaseName.BUILD: 20,
    PhaseName.FQA: 0,  # Mirrors build
    PhaseName.ECC: 1,
    PhaseName.INTEGRATION: 2,
    PhaseName.RFA: 1,
    PhaseName.COM: 0,  # Mirrors rfa
}


def parse_phase_name(value: Any) -> PhaseName:
    """Coerce a phase name (enum or string) to PhaseName."""
    if isinstance(value, PhaseName):
        return value
    try:
        return PhaseName(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown phase name '{value}'. Must be one of: {', '.join(p.value for p in PHASE_ORDER)}",
            field="phase_name",
            value=value
        )


@dataclass(frozen=True)
class PhaseConfiguration:
    """
    Static description of a project's phase chain.

    Invariants (checked on construction):
    - phase names are unique
    - every mirror comes after its source, and sources are not mirrors
    - the skippable phase is neither first nor a mirror
    """
    sequence: tuple[PhaseName, ...] = PHASE_ORDER
    mirrors: Mapping[PhaseName, PhaseName] = field(default_factory=lambda: dict(MIRROR_PHASES), hash=False)
    skippable: Optional[PhaseName] = SKIPPABLE_PHASE

    def __post_init__(self):
        # Read-only view of the mirror table
        object.__setattr__(self, "mirrors", MappingProxyType(dict(self.mirrors)))

        if len(set(self.sequence)) != len(self.sequence):
            raise ConfigurationError(
                "Phase sequence contains duplicate phases",
                config_key="sequence",
                actual_value=",".join(p.value for p in self.sequence)
            )

        positions = {phase: i for i, phase in enumerate(self.sequence)}

        for mirror, source in self.mirrors.items():
            if mirror not in positions or source not in positions:
                raise ConfigurationError(
                    f"Mirror pair {mirror.value} -> {source.value} references a phase outside the sequence",
                    config_key="mirrors"
                )
            if positions[mirror] < positions[source]:
                raise ConfigurationError(
                    f"Mirror phase '{mirror.value}' must come after its source '{source.value}'",
                    config_key="mirrors"
                )
            if source in self.mirrors:
                raise ConfigurationError(
                    f"Mirror source '{source.value}' is itself a mirror",
                    config_key="mirrors"
                )

        if self.skippable is not None:
            if self.skippable not in positions:
                raise ConfigurationError(
                    f"Skippable phase '{self.skippable.value}' is not in the sequence",
                    config_key="skippable"
                )
            # A skipped first phase would leave no previous deadline to chain from
            if positions[self.skippable] == 0:
                raise ConfigurationError(
                    "Skippable phase cannot be first in the sequence",
                    config_key="skippable",
                    actual_value=self.skippable.value
                )
            if self.skippable in self.mirrors:
                raise ConfigurationError(
                    "Skippable phase cannot be a mirror phase",
                    config_key="skippable",
                    actual_value=self.skippable.value
                )

    def index_of(self, phase: PhaseName) -> int:
        return self.sequence.index(phase)

    def is_mirror(self, phase: PhaseName) -> bool:
        return phase in self.mirrors

    def source_of(self, phase: PhaseName) -> Optional[PhaseName]:
        return self.mirrors.get(phase)

    def mirror_partners(self, phase: PhaseName) -> list[PhaseName]:
        """All phases whose deadline must equal this phase's (either direction)."""
        root = self.mirrors.get(phase, phase)
        group = [root] + [m for m, src in self.mirrors.items() if src == root]
        return [p for p in group if p != phase]

    def phases_after(self, phase: PhaseName) -> tuple[PhaseName, ...]:
        return self.sequence[self.index_of(phase) + 1:]

    def is_skipped(self, phase: PhaseName, allowed_days: int) -> bool:
        return phase == self.skippable and allowed_days == 0

    def counted_phases(self, allowed_days: dict[PhaseName, int]) -> list[PhaseName]:
        """Phases that count towards progress: no mirrors, no skipped phase."""
        return [
            phase for phase in self.sequence
            if not self.is_mirror(phase)
            and not self.is_skipped(phase, allowed_days.get(phase, 0))
        ]

    def normalize_durations(self, durations: dict[Any, Any]) -> dict[PhaseName, int]:
        """
        Validate a duration table and return it keyed by PhaseName.

        Every non-mirror phase needs a non-negative integer. Mirror phases may be
        omitted; if present they must be 0.
        """
        normalized: dict[PhaseName, int] = {}

        for raw_name, raw_days in durations.items():
            phase = parse_phase_name(raw_name)
            if phase not in self.sequence:
                raise ValidationError(
                    f"Phase '{phase.value}' is not part of this phase sequence",
                    field="allowed_days",
                    value=phase.value
                )
            if isinstance(raw_days, bool) or not isinstance(raw_days, int):
                raise ValidationError(
                    f"Allowed days for '{phase.value}' must be an integer",
                    field=f"allowed_days.{phase.value}",
                    value=raw_days
                )
            if raw_days < 0:
                raise ValidationError(
                    f"Allowed days for '{phase.value}' cannot be negative",
                    field=f"allowed_days.{phase.value}",
                    value=raw_days
                )
            if self.is_mirror(phase) and raw_days != 0:
                raise ValidationError(
                    f"Mirror phase '{phase.value}' must have 0 allowed days",
                    field=f"allowed_days.{phase.value}",
                    value=raw_days
                )
            normalized[phase] = raw_days

        missing = [
            phase.value for phase in self.sequence
            if phase not in normalized and not self.is_mirror(phase)
        ]
        if missing:
            raise ValidationError(
                f"Missing allowed days for: {', '.join(missing)}",
                field="allowed_days",
                value=",".join(missing)
            )

        for mirror in self.mirrors:
            normalized.setdefault(mirror, 0)

        return normalized


DEFAULT_PHASE_CONFIG = PhaseConfiguration()


def phase_names(phases: Iterable[PhaseName]) -> list[str]:
    """Plain string names, in the given order (for logging and API payloads)."""
    return [phase.value for phase in phases]
