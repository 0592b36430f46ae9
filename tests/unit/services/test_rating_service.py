"""Unit tests for the rating workflow service."""

from uuid import uuid4

import pytest

from workcomp_rater.core.result_types import Err
from workcomp_rater.models import (
    BusinessInfo,
    OptimizationSuggestion,
    PayrollLine,
    PremiumModifiers,
    PremiumOptimization,
    RatingResult,
    ValidationReport,
)
from workcomp_rater.services.rating.rating_engine import RatingEngine
from workcomp_rater.services.rating_service import RatingService
from workcomp_rater.services.rating_store import InMemoryRatingStore


class BrokenAdvisor:
    """Advisor whose backend is down."""

    async def suggest(self, business: BusinessInfo, result: RatingResult):
        raise RuntimeError("advisor offline")


class RecordingAdvisor:
    """Advisor that keeps the ratings it was asked about."""

    def __init__(self) -> None:
        self.seen: list[RatingResult] = []

    async def suggest(
        self, business: BusinessInfo, result: RatingResult
    ) -> PremiumOptimization:
        self.seen.append(result)
        return PremiumOptimization(
            suggestions=[
                OptimizationSuggestion(
                    type="credit", description="Add a safety program"
                )
            ]
        )


class TestRatingService:
    """Test validate, rate, advise and save."""

    @pytest.mark.asyncio
    async def test_rate_saves_result(
        self,
        rating_service: RatingService,
        rating_store: InMemoryRatingStore,
        office_business: BusinessInfo,
    ):
        result = await rating_service.rate(office_business)

        assert result.is_ok()
        saved = result.unwrap()
        assert saved.business_name == "Acme Bookkeeping"
        assert saved.result.total_premium == pytest.approx(301.0)
        assert len(rating_store) == 1
        assert await rating_service.get_rating(saved.rating_id) == saved

    @pytest.mark.asyncio
    async def test_rate_attaches_optimization_advice(
        self, rating_service: RatingService, office_business: BusinessInfo
    ):
        saved = (await rating_service.rate(office_business)).unwrap()

        assert saved.result.optimizations
        assert any("turnover" in text for text in saved.result.optimizations)

    @pytest.mark.asyncio
    async def test_invalid_submission_not_rated(
        self,
        rating_service: RatingService,
        rating_store: InMemoryRatingStore,
    ):
        business = BusinessInfo(
            payroll_lines=(
                PayrollLine(
                    state_code="CA",
                    class_code="8810",
                    annual_payroll=0.0,
                    employee_count=1,
                ),
            )
        )

        result = await rating_service.rate(business)

        assert isinstance(result, Err)
        assert isinstance(result.unwrap_err(), ValidationReport)
        assert not result.unwrap_err().is_valid
        assert len(rating_store) == 0

    @pytest.mark.asyncio
    async def test_failing_advisor_does_not_block_rating(
        self,
        rating_engine: RatingEngine,
        rating_store: InMemoryRatingStore,
        office_business: BusinessInfo,
    ):
        service = RatingService(rating_engine, rating_store, advisor=BrokenAdvisor())

        result = await service.rate(office_business)

        assert result.is_ok()
        assert result.unwrap().result.optimizations == []

    @pytest.mark.asyncio
    async def test_advisor_receives_completed_rating(
        self,
        rating_engine: RatingEngine,
        rating_store: InMemoryRatingStore,
        office_business: BusinessInfo,
    ):
        advisor = RecordingAdvisor()
        service = RatingService(rating_engine, rating_store, advisor=advisor)

        saved = (await service.rate(office_business)).unwrap()

        assert len(advisor.seen) == 1
        assert isinstance(advisor.seen[0], RatingResult)
        assert advisor.seen[0].total_premium == pytest.approx(301.0)
        assert saved.result.optimizations == ["Add a safety program"]

    @pytest.mark.asyncio
    async def test_review_classifications_flags_unknown_code(
        self, rating_service: RatingService
    ):
        business = BusinessInfo(
            payroll_lines=(
                PayrollLine(
                    state_code="TX",
                    class_code="5403",
                    annual_payroll=100_000.0,
                    employee_count=2,
                ),
            )
        )

        report = await rating_service.review_classifications(business)

        assert not report.is_valid
        assert any("Invalid class code 5403 for state TX" in e for e in report.errors)

    @pytest.mark.asyncio
    async def test_rate_with_modifiers(
        self, rating_service: RatingService, multi_state_business: BusinessInfo
    ):
        business = multi_state_business.model_copy(
            update={"modifiers": PremiumModifiers(experience_mod=0.9)}
        )

        result = await rating_service.rate_with_modifiers(business)

        breakdowns = result.unwrap()
        assert [(b.state_code, b.class_code) for b in breakdowns] == [
            ("TX", "8810"),
            ("CA", "5403"),
            ("CA", "8810"),
        ]
        assert all(b.experience_mod == 0.9 for b in breakdowns)

    @pytest.mark.asyncio
    async def test_rate_with_modifiers_requires_modifiers(
        self, rating_service: RatingService, office_business: BusinessInfo
    ):
        result = await rating_service.rate_with_modifiers(office_business)

        assert result.is_err()
        assert "modifiers" in result.unwrap_err()

    @pytest.mark.asyncio
    async def test_unknown_rating(self, rating_service: RatingService):
        assert await rating_service.get_rating(uuid4()) is None
