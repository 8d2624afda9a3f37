"""
conftest.py — Shared pytest fixtures for the InkValue Studio backend test suite.

Domain tests run against an InMemoryStore; only test_persistence.py touches
SQLite (a throwaway file under tmp_path). No network access is required: the
advisor tests patch litellm.acompletion.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``inkvalue.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
import itertools
from datetime import datetime, timedelta, timezone

import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any inkvalue imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

# Keep provider keys from a developer's shell out of the suite
for _var in ("GEMINI_API_KEY", "GROQ_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
    os.environ.pop(_var, None)


# ---------------------------------------------------------------------------
# Deterministic ids and clocks
# ---------------------------------------------------------------------------

class StepClock:
    """Returns start, start + step, start + 2*step, ... on each call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter):03d}"


@pytest.fixture
def clock():
    """Starts 2024-03-10 12:00 UTC and advances one minute per call."""
    return StepClock(datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# PricingEngine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def pricing_engine():
    """PricingEngine is stateless; one instance serves the whole session."""
    from inkvalue.services.pricing_engine import PricingEngine
    return PricingEngine()


@pytest.fixture
def default_costs():
    """
    CostProfile with all defaults.

    Fixed expenses = 1500 + 300 + 200 + 100 = 2100
    Hours          = 22 days x 6 h = 132  →  overhead ≈ 15.909/h
    """
    from inkvalue.models.schemas import CostProfile
    return CostProfile()


@pytest.fixture
def round_costs():
    """
    CostProfile chosen for hand-checkable arithmetic:
      rent = 1000, everything else 0, 20 days x 5 h = 100 h  →  overhead = 10/h
    """
    from inkvalue.models.schemas import CostProfile
    return CostProfile(
        monthly_rent=1000.0,
        monthly_utilities=0.0,
        monthly_marketing=0.0,
        monthly_misc=0.0,
        days_worked_per_month=20.0,
        hours_worked_per_day=5.0,
    )


@pytest.fixture
def simple_project():
    """
    Neutral multipliers (Old School x1.0, Baixa x1.0):
      3 h x 100/h labor + 50 material, 50% margin, no discount.
    With round_costs: base = 300 + 30 + 50 = 380, price = 570.
    """
    from inkvalue.models.schemas import ComplexityLevel, Project, TattooStyle
    return Project(
        style=TattooStyle.OLD_SCHOOL,
        complexity=ComplexityLevel.LOW,
        design_time_hours=1.0,
        tattoo_time_hours=2.0,
        hourly_rate=100.0,
        material_cost=50.0,
        profit_margin_percent=50.0,
    )


# ---------------------------------------------------------------------------
# Client / proposal fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def client_ana(clock):
    from inkvalue.models.schemas import Client
    return Client(id="cli-ana", name="Ana Souza", phone="+55 (11) 98765-4321", created_at=clock())


@pytest.fixture
def proposal_book(pricing_engine, clock):
    from inkvalue.services.proposal_lifecycle import ProposalBook
    return ProposalBook(engine=pricing_engine, id_factory=sequential_ids("prop"), clock=clock)


# ---------------------------------------------------------------------------
# StudioService fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store():
    from inkvalue.services.persistence import InMemoryStore
    return InMemoryStore()


@pytest.fixture
def studio(memory_store, clock):
    """StudioService over an empty in-memory store with deterministic ids."""
    from inkvalue.services.studio_service import StudioService
    return StudioService(memory_store, id_factory=sequential_ids("id"), clock=clock)


@pytest.fixture
def api_client(studio):
    """
    TestClient bound to the FastAPI app with the in-memory studio installed,
    so the lifespan never opens the SQLite file.
    """
    from fastapi.testclient import TestClient
    from inkvalue.main import app

    app.state.studio = studio
    with TestClient(app) as client:
        yield client
    app.state.studio = None
