"""
Pytest fixtures and configuration for Fibre Tracker tests.

Provides:
- Test client for the FastAPI app
- Deadline engine on the default (ZA) calendar
- Scenario duration tables and their expected deadlines
- Registry cleanup for custom holiday calendars
"""
import pytest
from datetime import date
from typing import Dict

from fastapi.testclient import TestClient

from fibretrack.main import app
from fibretrack.models.enums import PhaseName
from fibretrack.services import holidays
from fibretrack.services.recalculation.engine import DeadlineEngine


# ==========================================
# APP & ENGINE
# ==========================================

@pytest.fixture
def client() -> TestClient:
    """Test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def engine() -> DeadlineEngine:
    """Deadline engine on the South African calendar."""
    return DeadlineEngine(country_code="ZA")


# ==========================================
# SCENARIO DATA
# ==========================================

# Monday 11 March 2024. The chain crosses Human Rights Day (Thu 21 Mar),
# Good Friday (29 Mar) and Workers' Day (Wed 1 May).
SCENARIO_ANCHOR = date(2024, 3, 11)


@pytest.fixture
def scenario_anchor() -> date:
    return SCENARIO_ANCHOR


@pytest.fixture
def scenario_durations() -> Dict[PhaseName, int]:
    """Duration table with wayleave skipped."""
    return {
        PhaseName.PLANNING: 10,
        PhaseName.FUNDING: 2,
        PhaseName.WAYLEAVE: 0,
        PhaseName.MATERIALS: 15,
        PhaseName.ANNOUNCEMENT: 1,
        PhaseName.KICKOFF: 2,
        PhaseName.BUILD: 20,
        PhaseName.FQA: 0,
        PhaseName.ECC: 1,
        PhaseName.INTEGRATION: 2,
        PhaseName.RFA: 1,
        PhaseName.COM: 0,
    }


@pytest.fixture
def scenario_deadlines() -> Dict[PhaseName, date]:
    """Expected deadlines for scenario_durations from SCENARIO_ANCHOR."""
    return {
        PhaseName.PLANNING: date(2024, 3, 26),
        PhaseName.FUNDING: date(2024, 3, 28),
        PhaseName.MATERIALS: date(2024, 4, 19),
        PhaseName.ANNOUNCEMENT: date(2024, 4, 22),
        PhaseName.KICKOFF: date(2024, 4, 24),
        PhaseName.BUILD: date(2024, 5, 23),
        PhaseName.FQA: date(2024, 5, 23),
        PhaseName.ECC: date(2024, 5, 24),
        PhaseName.INTEGRATION: date(2024, 5, 28),
        PhaseName.RFA: date(2024, 5, 29),
        PhaseName.COM: date(2024, 5, 29),
    }


# ==========================================
# CLEANUP
# ==========================================

@pytest.fixture
def calendar_registry():
    """Restore the holiday calendar registry after a test registers its own."""
    saved = dict(holidays._calendars)
    yield holidays
    holidays._calendars.clear()
    holidays._calendars.update(saved)


# ==========================================
# MARKERS
# ==========================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (isolated, fast)")
    config.addinivalue_line("markers", "integration: Integration tests (full app stack)")
    config.addinivalue_line("markers", "edge: Edge case tests")
