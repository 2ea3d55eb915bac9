"""
Tests for project update resolution.

Priority: deadline override > anchor change > duration change > nothing.
"""
import logging
import pytest
from datetime import date

from fibretrack.core.exceptions import ValidationError
from fibretrack.models.enums import PhaseName, RecalculationTrigger
from fibretrack.services.project_updates import (
    PhaseUpdate,
    ProjectSnapshot,
    ProjectUpdate,
    build_allowed_days,
    resolve_project_update,
)


@pytest.fixture
def snapshot(scenario_anchor, scenario_durations, scenario_deadlines) -> ProjectSnapshot:
    return ProjectSnapshot(
        anchor_date=scenario_anchor,
        allowed_days=dict(scenario_durations),
        deadlines=dict(scenario_deadlines),
    )


class TestBuildAllowedDays:
    """Duration tables for new projects."""

    @pytest.mark.unit
    def test_settings_defaults(self):
        table = build_allowed_days()

        assert table[PhaseName.PLANNING] == 10
        assert table[PhaseName.WAYLEAVE] == 20
        assert table[PhaseName.BUILD] == 20
        assert table[PhaseName.FQA] == 0
        assert table[PhaseName.COM] == 0
        assert len(table) == 12

    @pytest.mark.unit
    def test_overrides_applied(self):
        table = build_allowed_days(overrides={"wayleave": 0, PhaseName.BUILD: 25})

        assert table[PhaseName.WAYLEAVE] == 0
        assert table[PhaseName.BUILD] == 25
        assert table[PhaseName.PLANNING] == 10

    @pytest.mark.unit
    def test_mirror_pinned_to_zero(self):
        table = build_allowed_days(overrides={"fqa": 5})

        assert table[PhaseName.FQA] == 0

    @pytest.mark.unit
    def test_explicit_defaults(self, scenario_durations):
        defaults = {phase.value: days for phase, days in scenario_durations.items()}

        assert build_allowed_days(defaults=defaults) == scenario_durations

    @pytest.mark.unit
    def test_negative_override_rejected(self):
        with pytest.raises(ValidationError):
            build_allowed_days(overrides={"planning": -3})


class TestResolveProjectUpdate:
    """Mode selection and the resulting deadlines."""

    @pytest.mark.unit
    def test_no_changes(self, snapshot, scenario_deadlines):
        outcome = resolve_project_update(snapshot, ProjectUpdate(), allow_deadline_overrides=True)

        assert outcome.trigger == RecalculationTrigger.NONE
        assert outcome.deadlines == scenario_deadlines
        assert outcome.start_phase is None

    @pytest.mark.unit
    def test_anchor_change(self, snapshot):
        outcome = resolve_project_update(
            snapshot, ProjectUpdate(anchor_date=date(2024, 3, 18)), allow_deadline_overrides=False
        )

        assert outcome.trigger == RecalculationTrigger.ANCHOR_CHANGE
        assert outcome.anchor_date == date(2024, 3, 18)
        assert outcome.deadlines[PhaseName.PLANNING] == date(2024, 4, 3)

    @pytest.mark.unit
    def test_duration_change(self, snapshot):
        update = ProjectUpdate(phases=[PhaseUpdate("planning", allowed_days=12)])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=False)

        assert outcome.trigger == RecalculationTrigger.DURATION_CHANGE
        assert outcome.allowed_days[PhaseName.PLANNING] == 12
        assert outcome.deadlines[PhaseName.PLANNING] == date(2024, 3, 28)
        assert outcome.anchor_date == date(2024, 3, 11)

    @pytest.mark.unit
    def test_snapshot_not_mutated(self, snapshot, scenario_durations):
        update = ProjectUpdate(phases=[PhaseUpdate("planning", allowed_days=12)])

        resolve_project_update(snapshot, update, allow_deadline_overrides=False)

        assert snapshot.allowed_days == scenario_durations

    @pytest.mark.unit
    def test_anchor_beats_duration(self, snapshot, engine, scenario_durations):
        update = ProjectUpdate(
            anchor_date=date(2024, 3, 18),
            phases=[PhaseUpdate(PhaseName.BUILD, allowed_days=25)]
        )

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=False)

        # One full pass from the new anchor with the new durations
        scenario_durations[PhaseName.BUILD] = 25
        assert outcome.trigger == RecalculationTrigger.ANCHOR_CHANGE
        assert outcome.deadlines == engine.compute_initial_deadlines(date(2024, 3, 18), scenario_durations)

    @pytest.mark.unit
    def test_override_when_allowed(self, snapshot, scenario_deadlines):
        update = ProjectUpdate(phases=[PhaseUpdate("build", deadline=date(2024, 6, 3))])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=True)

        assert outcome.trigger == RecalculationTrigger.DEADLINE_OVERRIDE
        assert outcome.start_phase == PhaseName.BUILD
        assert outcome.deadlines[PhaseName.RFA] == date(2024, 6, 7)
        assert outcome.deadlines[PhaseName.PLANNING] == scenario_deadlines[PhaseName.PLANNING]

    @pytest.mark.unit
    def test_override_beats_anchor(self, snapshot, scenario_deadlines):
        """With an override present the anchor is stored but not re-chained from."""
        update = ProjectUpdate(
            anchor_date=date(2024, 3, 18),
            phases=[PhaseUpdate("build", deadline=date(2024, 6, 3))]
        )

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=True)

        assert outcome.trigger == RecalculationTrigger.DEADLINE_OVERRIDE
        assert outcome.anchor_date == date(2024, 3, 18)
        assert outcome.deadlines[PhaseName.PLANNING] == scenario_deadlines[PhaseName.PLANNING]

    @pytest.mark.unit
    def test_earliest_override_wins(self, snapshot):
        update = ProjectUpdate(phases=[
            PhaseUpdate("ecc", deadline=date(2024, 7, 1)),
            PhaseUpdate("materials", deadline=date(2024, 5, 2)),
        ])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=True)

        assert outcome.start_phase == PhaseName.MATERIALS
        # ecc is re-chained from materials, not taken from the request
        assert outcome.deadlines[PhaseName.ECC] == date(2024, 6, 5)

    @pytest.mark.unit
    def test_override_ignored_when_not_allowed(self, snapshot, scenario_deadlines, caplog):
        update = ProjectUpdate(phases=[PhaseUpdate("build", deadline=date(2024, 6, 3))])

        with caplog.at_level(logging.WARNING, logger="fibretrack.services.project_updates"):
            outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=False)

        assert outcome.trigger == RecalculationTrigger.NONE
        assert outcome.ignored_overrides == [PhaseName.BUILD]
        assert outcome.deadlines == scenario_deadlines
        assert "ignored" in caplog.text

    @pytest.mark.unit
    def test_ignored_override_falls_back_to_duration(self, snapshot):
        update = ProjectUpdate(phases=[
            PhaseUpdate("build", deadline=date(2024, 6, 3)),
            PhaseUpdate("planning", allowed_days=12),
        ])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=False)

        assert outcome.trigger == RecalculationTrigger.DURATION_CHANGE
        assert outcome.deadlines[PhaseName.PLANNING] == date(2024, 3, 28)

    @pytest.mark.unit
    def test_override_with_duration_change(self, snapshot):
        """Downstream of an override uses the updated durations."""
        update = ProjectUpdate(phases=[
            PhaseUpdate("build", deadline=date(2024, 6, 3)),
            PhaseUpdate("ecc", allowed_days=2),
        ])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=True)

        assert outcome.trigger == RecalculationTrigger.DEADLINE_OVERRIDE
        assert outcome.deadlines[PhaseName.ECC] == date(2024, 6, 5)
        assert outcome.allowed_days[PhaseName.ECC] == 2

    @pytest.mark.unit
    def test_mirror_duration_ignored(self, snapshot, scenario_deadlines):
        update = ProjectUpdate(phases=[PhaseUpdate("fqa", allowed_days=4)])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=False)

        assert outcome.trigger == RecalculationTrigger.NONE
        assert outcome.allowed_days[PhaseName.FQA] == 0
        assert outcome.deadlines == scenario_deadlines

    @pytest.mark.unit
    def test_override_on_skipped_phase(self, snapshot):
        update = ProjectUpdate(phases=[PhaseUpdate("wayleave", deadline=date(2024, 4, 5))])

        with pytest.raises(ValidationError):
            resolve_project_update(snapshot, update, allow_deadline_overrides=True)

    @pytest.mark.unit
    def test_skip_wayleave_and_override_later_phase(self, engine, scenario_anchor, scenario_durations):
        """Setting wayleave to 0 alongside a build override drops its old deadline."""
        scenario_durations[PhaseName.WAYLEAVE] = 20
        with_wayleave = ProjectSnapshot(
            anchor_date=scenario_anchor,
            allowed_days=dict(scenario_durations),
            deadlines=engine.compute_initial_deadlines(scenario_anchor, scenario_durations),
        )
        assert with_wayleave.deadlines[PhaseName.WAYLEAVE] == date(2024, 4, 26)

        update = ProjectUpdate(phases=[
            PhaseUpdate("wayleave", allowed_days=0),
            PhaseUpdate("build", deadline=date(2024, 7, 1)),
        ])

        outcome = resolve_project_update(with_wayleave, update, allow_deadline_overrides=True)

        assert outcome.trigger == RecalculationTrigger.DEADLINE_OVERRIDE
        assert outcome.allowed_days[PhaseName.WAYLEAVE] == 0
        assert PhaseName.WAYLEAVE not in outcome.deadlines
        assert outcome.deadlines[PhaseName.BUILD] == date(2024, 7, 1)
        assert outcome.deadlines[PhaseName.FQA] == date(2024, 7, 1)
        assert outcome.deadlines[PhaseName.PLANNING] == date(2024, 3, 26)

    @pytest.mark.unit
    def test_enable_wayleave_and_override_it(self, snapshot):
        """Giving wayleave days in the same edit makes it overridable."""
        update = ProjectUpdate(phases=[
            PhaseUpdate("wayleave", allowed_days=5, deadline=date(2024, 4, 5)),
        ])

        outcome = resolve_project_update(snapshot, update, allow_deadline_overrides=True)

        assert outcome.deadlines[PhaseName.WAYLEAVE] == date(2024, 4, 5)
        assert outcome.deadlines[PhaseName.MATERIALS] == date(2024, 4, 26)
