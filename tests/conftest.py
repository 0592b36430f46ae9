"""Test configuration and fixtures for the rating service.

Provides an in-memory reference store, a rating engine wired to it, a
rating service, and sample submissions.
"""

import asyncio
from collections.abc import Generator
from datetime import date
from typing import Any

import pytest
from fastapi.testclient import TestClient

from workcomp_rater.core.config import clear_settings_cache
from workcomp_rater.models import (
    Address,
    BusinessInfo,
    ClassCodeRate,
    PayrollLine,
    Territory,
    ZipRange,
)
from workcomp_rater.services.optimization import RulesOptimizationAdvisor
from workcomp_rater.services.rating.rating_engine import RatingEngine
from workcomp_rater.services.rating.risk_scoring import RiskScorer
from workcomp_rater.services.rating_service import RatingService
from workcomp_rater.services.rating_store import InMemoryRatingStore
from workcomp_rater.services.reference_data import InMemoryReferenceStore

# Configure pytest-asyncio
pytest_plugins = ["pytest_asyncio"]

EFFECTIVE_DATE = date(2024, 1, 1)


class SlowReferenceSource:
    """Reference source whose lookups never finish in time."""

    def __init__(self, delay_seconds: float = 1.0) -> None:
        self.delay_seconds = delay_seconds

    async def get_class_code_rate(
        self, state_code: str, class_code: str, effective_date: date
    ) -> ClassCodeRate | None:
        await asyncio.sleep(self.delay_seconds)
        return None

    async def get_territories(
        self, state_code: str, effective_date: date
    ) -> list[Territory]:
        await asyncio.sleep(self.delay_seconds)
        return []


class FailingReferenceSource:
    """Reference source whose lookups raise."""

    async def get_class_code_rate(
        self, state_code: str, class_code: str, effective_date: date
    ) -> ClassCodeRate | None:
        raise ConnectionError("reference database unavailable")

    async def get_territories(
        self, state_code: str, effective_date: date
    ) -> list[Territory]:
        raise ConnectionError("reference database unavailable")


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """Each test reads settings from a clean cache."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def effective_date() -> date:
    return EFFECTIVE_DATE


@pytest.fixture
def reference_data() -> dict[str, Any]:
    """Reference data document as it would be stored on disk."""
    return {
        "class_code_rates": [
            {
                "state_code": "CA",
                "class_code": "8810",
                "effective_date": "2024-01-01",
                "base_rate": 0.35,
                "industry_group": "Office & Clerical",
            },
            {
                "state_code": "CA",
                "class_code": "5403",
                "effective_date": "2024-01-01",
                "base_rate": 8.12,
                "hazard_group": "E",
                "industry_group": "Construction",
                "governing_class": True,
            },
            {
                "state_code": "TX",
                "class_code": "8810",
                "effective_date": "2024-01-01",
                "base_rate": 0.18,
            },
        ],
        "territories": [
            {
                "state_code": "CA",
                "territory_code": "CA-LA",
                "rate_multiplier": 1.15,
                "description": "Los Angeles Metro",
                "zip_ranges": [{"start": 90001, "end": 90899}],
            },
            {
                "state_code": "CA",
                "territory_code": "CA-BASE",
                "rate_multiplier": 1.0,
                "description": "California Base Territory",
            },
            {
                "state_code": "TX",
                "territory_code": "TX-HOU",
                "rate_multiplier": 1.1,
                "description": "Houston Metro",
                "zip_ranges": [{"start": 77001, "end": 77299}],
            },
        ],
    }


@pytest.fixture
def reference_store(reference_data: dict[str, Any]) -> InMemoryReferenceStore:
    return InMemoryReferenceStore.from_dict(reference_data)


@pytest.fixture
def rating_engine(reference_store: InMemoryReferenceStore) -> RatingEngine:
    return RatingEngine(
        rate_source=reference_store,
        territory_source=reference_store,
        lookup_timeout_seconds=1.0,
    )


@pytest.fixture
def scoring_engine(reference_store: InMemoryReferenceStore) -> RatingEngine:
    """Engine that also attaches a risk score."""
    return RatingEngine(
        rate_source=reference_store,
        territory_source=reference_store,
        lookup_timeout_seconds=1.0,
        risk_scorer=RiskScorer(as_of=date(2024, 6, 1)),
    )


@pytest.fixture
def rating_store() -> InMemoryRatingStore:
    return InMemoryRatingStore()


@pytest.fixture
def rating_service(
    rating_engine: RatingEngine, rating_store: InMemoryRatingStore
) -> RatingService:
    return RatingService(
        rating_engine, rating_store, advisor=RulesOptimizationAdvisor()
    )


@pytest.fixture
def office_business() -> BusinessInfo:
    """One CA clerical line, no losses, no credits, no location."""
    return BusinessInfo(
        name="Acme Bookkeeping",
        description="Office bookkeeping services",
        years_in_business=1.0,
        payroll_lines=(
            PayrollLine(
                state_code="CA",
                class_code="8810",
                annual_payroll=100_000.0,
                employee_count=2,
            ),
        ),
    )


@pytest.fixture
def multi_state_business() -> BusinessInfo:
    """Lines across CA and TX with locations in both states."""
    return BusinessInfo(
        name="Lone Star Builders",
        description="General construction",
        years_in_business=12.0,
        payroll_lines=(
            PayrollLine(
                state_code="TX",
                class_code="8810",
                annual_payroll=80_000.0,
                employee_count=2,
            ),
            PayrollLine(
                state_code="CA",
                class_code="5403",
                annual_payroll=400_000.0,
                employee_count=8,
            ),
            PayrollLine(
                state_code="CA",
                class_code="8810",
                annual_payroll=60_000.0,
                employee_count=1,
            ),
        ),
        locations=(
            Address(city="Houston", state="TX", zip_code="77002"),
            Address(city="Pasadena", state="CA", zip_code="90210"),
        ),
    )


@pytest.fixture
def tie_break_territories() -> list[Territory]:
    """Two territories whose ZIP ranges overlap at 90210."""
    return [
        Territory(
            state_code="CA",
            territory_code="CA-WEST",
            rate_multiplier=1.1,
            description="Westside",
            zip_ranges=(ZipRange(start=90200, end=90299),),
        ),
        Territory(
            state_code="CA",
            territory_code="CA-HILLS",
            rate_multiplier=1.3,
            description="Hills",
            zip_ranges=(ZipRange(start=90210, end=90210),),
        ),
    ]


@pytest.fixture
def client(reference_store: InMemoryReferenceStore) -> Generator[TestClient, None, None]:
    """Test client whose dependencies read the fixture reference store."""
    from workcomp_rater.api.dependencies import (
        get_rating_store,
        get_reference_store,
        reset_dependencies,
    )
    from workcomp_rater.main import app

    store = InMemoryRatingStore()
    app.dependency_overrides[get_reference_store] = lambda: reference_store
    app.dependency_overrides[get_rating_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    reset_dependencies()


@pytest.fixture
def slow_source() -> SlowReferenceSource:
    return SlowReferenceSource(delay_seconds=1.0)


@pytest.fixture
def failing_source() -> FailingReferenceSource:
    return FailingReferenceSource()
