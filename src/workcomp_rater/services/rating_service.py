"""Rating workflow service: validate, rate, advise, save."""

import logging
from datetime import date
from uuid import UUID

from beartype import beartype

from ..core.result_types import Err, Ok, Result
from ..models.business import BusinessInfo
from ..models.rating import (
    PremiumBreakdown,
    RatingResult,
    SavedRating,
    ValidationReport,
)
from .optimization import FallbackOptimizationAdvisor, OptimizationAdvisor
from .rating.business_rules import RatingValidator
from .rating.premium_modifiers import ModifiedPremiumCalculator
from .rating.rating_engine import RatingEngine, location_for_line
from .rating_store import RatingSink

logger = logging.getLogger(__name__)


@beartype
class RatingService:
    """Service for rating submissions end to end."""

    def __init__(
        self,
        engine: RatingEngine,
        sink: RatingSink,
        advisor: OptimizationAdvisor | None = None,
        validator: RatingValidator | None = None,
    ) -> None:
        """Initialize rating service.

        Args:
            engine: Rating engine
            sink: Where completed ratings are saved
            advisor: Optimization advisor (defaults to no suggestions)
            validator: Validation pass run before rating
        """
        self._engine = engine
        self._sink = sink
        self._advisor = advisor or FallbackOptimizationAdvisor()
        self._validator = validator or RatingValidator()
        self._modified_calculator = ModifiedPremiumCalculator(
            engine.rate_table, engine.territory_resolver
        )

    @beartype
    def validate(self, business: BusinessInfo) -> ValidationReport:
        return self._validator.validate_rating_data(business)

    @beartype
    async def review_classifications(
        self, business: BusinessInfo, effective_date: date | None = None
    ) -> ValidationReport:
        """Validation pass plus class code checks against the rate table."""
        report = self.validate(business)
        classification = await self._validator.validate_payroll_classifications(
            business.payroll_lines,
            self._engine.rate_table,
            effective_date or self._engine_default_date(),
        )
        return ValidationReport(
            errors=[*report.errors, *classification.errors],
            warnings=[*report.warnings, *classification.warnings],
            suggestions=[*report.suggestions, *classification.suggestions],
        )

    @beartype
    async def rate(
        self, business: BusinessInfo, effective_date: date | None = None
    ) -> Result[SavedRating, ValidationReport | str]:
        """Validate, rate, attach advice and save.

        Args:
            business: Submitted business data
            effective_date: Rating period

        Returns:
            Saved rating, the failed ValidationReport, or an error message
        """
        report = self.validate(business)
        if not report.is_valid:
            logger.info(
                "Rating refused for %r: %d validation errors",
                business.name,
                len(report.errors),
            )
            return Err(report)

        rating_result = await self._engine.calculate_premium(business, effective_date)
        if isinstance(rating_result, Err):
            return rating_result

        result = rating_result.unwrap()
        optimization = await self._advise(business, result)
        if optimization:
            result = result.model_copy(update={"optimizations": optimization})

        saved = await self._sink.save_rating(business.name, result)
        if isinstance(saved, Err):
            return Err(f"Rating could not be saved: {saved.unwrap_err()}")
        return saved

    @beartype
    async def rate_with_modifiers(
        self, business: BusinessInfo, effective_date: date | None = None
    ) -> Result[list[PremiumBreakdown], ValidationReport | str]:
        """Rate with the underwriter modifiers carried on the submission."""
        report = self.validate(business)
        if not report.is_valid:
            return Err(report)
        if business.modifiers is None:
            return Err("Submission carries no premium modifiers")
        if not business.payroll_lines:
            return Err("At least one payroll line is required for rating")

        effective_date = effective_date or self._engine_default_date()
        states = list(dict.fromkeys(line.state_code for line in business.payroll_lines))
        breakdowns: list[PremiumBreakdown] = []
        for state_code in states:
            first_line = next(
                line for line in business.payroll_lines if line.state_code == state_code
            )
            breakdowns.extend(
                await self._modified_calculator.calculate_state_premium(
                    business.payroll_lines,
                    business.modifiers,
                    state_code,
                    effective_date,
                    location=location_for_line(first_line, business.locations),
                )
            )
        return Ok(breakdowns)

    @beartype
    async def get_rating(self, rating_id: UUID) -> SavedRating | None:
        return await self._sink.get_rating(rating_id)

    async def _advise(
        self, business: BusinessInfo, result: RatingResult
    ) -> list[str]:
        # Advisor failures leave the rating unchanged
        try:
            optimization = await self._advisor.suggest(business, result)
        except Exception as e:
            logger.warning("Premium optimization unavailable: %s", e)
            return []
        return [s.description for s in optimization.suggestions]

    def _engine_default_date(self) -> date:
        return self._engine.default_effective_date
