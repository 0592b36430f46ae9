"""Premium optimization advice.

Advisors only describe opportunities; they never change a rating's numbers.
``RulesOptimizationAdvisor`` points at schedule credits the submission does
not yet earn. A language-model backed advisor can be injected through the
same ``OptimizationAdvisor`` protocol.
"""

import logging
from typing import Protocol, runtime_checkable

from beartype import beartype

from ..models.business import BusinessInfo
from ..models.rating import OptimizationSuggestion, PremiumOptimization, RatingResult
from .rating import schedule_credit as sc

logger = logging.getLogger(__name__)


@runtime_checkable
class OptimizationAdvisor(Protocol):
    """Produces optimization narratives for a completed rating."""

    async def suggest(
        self, business: BusinessInfo, result: RatingResult
    ) -> PremiumOptimization: ...


@beartype
class FallbackOptimizationAdvisor:
    """Advisor used when no suggestion service is available."""

    async def suggest(
        self, business: BusinessInfo, result: RatingResult
    ) -> PremiumOptimization:
        return PremiumOptimization()


@beartype
class RulesOptimizationAdvisor:
    """Suggests schedule credits that are within reach."""

    @beartype
    async def suggest(
        self, business: BusinessInfo, result: RatingResult
    ) -> PremiumOptimization:
        """Estimate savings for each unearned schedule credit rule.

        Savings are measured against the modified premium with the current
        credit, respecting the 25% cap.
        """
        modified_total = sum(b.modified_premium for b in result.breakdowns)
        current = sc.ScheduleCreditCalculator.compute(
            business.workforce_metrics,
            business.safety_programs,
            business.years_in_business,
        )
        metrics = business.workforce_metrics

        candidates: list[tuple[float, str, str, str]] = []
        if metrics.turnover_rate >= sc.LOW_TURNOVER_THRESHOLD:
            candidates.append(
                (
                    sc.LOW_TURNOVER_CREDIT,
                    "credit",
                    "Reduce annual turnover below 15% to earn a 5% schedule credit",
                    "long-term",
                )
            )
        if metrics.training_hours_per_year <= sc.TRAINING_HOURS_THRESHOLD:
            candidates.append(
                (
                    sc.TRAINING_CREDIT,
                    "program",
                    "Provide more than 20 training hours per employee per year to earn a 4% credit",
                    "short-term",
                )
            )
        program_credit = sc.ScheduleCreditCalculator.safety_program_credit(
            business.safety_programs
        )
        if program_credit < sc.MAX_SAFETY_PROGRAM_CREDIT:
            candidates.append(
                (
                    sc.SAFETY_PROGRAM_CREDIT,
                    "program",
                    "Activate an additional safety program to earn a further 2% credit",
                    "immediate",
                )
            )

        suggestions = []
        for credit, kind, description, timeframe in candidates:
            gained = min(sc.MAX_SCHEDULE_CREDIT, current + credit) - current
            if gained <= 0:
                continue
            suggestions.append(
                OptimizationSuggestion(
                    type=kind,
                    description=description,
                    potential_savings=round(modified_total * gained, 2),
                    implementation=description,
                    timeframe=timeframe,
                    confidence=0.8,
                )
            )

        suggestions.sort(key=lambda s: s.potential_savings, reverse=True)
        logger.debug("Generated %d optimization suggestions", len(suggestions))
        return PremiumOptimization(
            suggestions=suggestions,
            total_potential_savings=round(
                sum(s.potential_savings for s in suggestions), 2
            ),
            prioritized_actions=[s.description for s in suggestions],
        )
