# PolicyCore - Policy Decision Management System
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.
"""Main rating engine that orchestrates all rating calculations.

For each payroll line, in input order:

1. base rate from the rate table
2. territory for the line's location
3. manual premium = payroll / 100 x base rate
4. territory-adjusted = manual x territory multiplier
5. experience mod, with expected losses = manual x expected loss ratio
6. schedule credit
7. final = territory-adjusted x mod x (1 - credit)

Lines are rated concurrently; breakdowns come back in input order and the
total premium is their sum. Missing reference data degrades a line to
defaults with a warning instead of failing the run.
"""

import asyncio
import logging
import time
from datetime import date

from beartype import beartype

from ...core.result_types import Err, Ok, Result
from ...models.business import Address, BusinessInfo, PayrollLine
from ...models.rating import PremiumBreakdown, RatingResult, TerritoryResolution
from .experience_mod import ExperienceModCalculator
from .premium_modifiers import calculate_manual_premium, calculate_total_premium
from .rate_tables import ClassCodeRateSource, RateTable
from .risk_scoring import RiskScorer
from .schedule_credit import ScheduleCreditCalculator
from .territory_management import TerritoryResolver, TerritorySource

logger = logging.getLogger(__name__)

# Expected annual losses as a share of manual premium. Not actuarially
# sourced; kept overridable until it is reviewed.
DEFAULT_EXPECTED_LOSS_RATIO = 0.05
DEFAULT_EFFECTIVE_DATE = date(2024, 1, 1)


@beartype
def location_for_line(line: PayrollLine, locations: tuple[Address, ...]) -> Address:
    """First location in the line's state, or a state-only placeholder."""
    for location in locations:
        if location.state.strip().upper() == line.state_code:
            return location
    return Address(state=line.state_code)


@beartype
class RatingEngine:
    """Turns a BusinessInfo submission into premium breakdowns."""

    def __init__(
        self,
        rate_source: ClassCodeRateSource,
        territory_source: TerritorySource,
        expected_loss_ratio: float = DEFAULT_EXPECTED_LOSS_RATIO,
        default_effective_date: date = DEFAULT_EFFECTIVE_DATE,
        lookup_timeout_seconds: float | None = None,
        risk_scorer: RiskScorer | None = None,
    ):
        """Initialize rating engine with all dependencies.

        Args:
            rate_source: Reference store for class code rates
            territory_source: Reference store for territories
            expected_loss_ratio: Expected losses as a share of manual premium
            default_effective_date: Rating period when none is given
            lookup_timeout_seconds: Deadline per reference lookup
            risk_scorer: Scores the submission when provided
        """
        if expected_loss_ratio <= 0:
            raise ValueError("expected_loss_ratio must be positive")

        self._rate_table = RateTable(rate_source, lookup_timeout_seconds)
        self._territory_resolver = TerritoryResolver(
            territory_source, lookup_timeout_seconds
        )
        self._expected_loss_ratio = expected_loss_ratio
        self._default_effective_date = default_effective_date
        self._risk_scorer = risk_scorer

    @property
    def rate_table(self) -> RateTable:
        return self._rate_table

    @property
    def territory_resolver(self) -> TerritoryResolver:
        return self._territory_resolver

    @property
    def expected_loss_ratio(self) -> float:
        return self._expected_loss_ratio

    @property
    def default_effective_date(self) -> date:
        return self._default_effective_date

    @beartype
    async def calculate_premium(
        self,
        business_info: BusinessInfo,
        effective_date: date | None = None,
    ) -> Result[RatingResult, str]:
        """Calculate premium for every payroll line.

        This is the main entry point for premium calculation. Run the
        validation pass first; the engine itself only rejects a submission
        without payroll lines.

        Args:
            business_info: Submitted business data
            effective_date: Rating period (defaults to the configured period)

        Returns:
            Result containing the rating or a contract error
        """
        if not business_info.payroll_lines:
            return Err("At least one payroll line is required for rating")

        start_time = time.perf_counter()
        effective_date = effective_date or self._default_effective_date

        schedule_credit = ScheduleCreditCalculator.compute(
            business_info.workforce_metrics,
            business_info.safety_programs,
            business_info.years_in_business,
        )

        breakdowns = await asyncio.gather(
            *(
                self._rate_line(line, business_info, effective_date, schedule_credit)
                for line in business_info.payroll_lines
            )
        )

        warnings = [warning for b in breakdowns for warning in b.warnings]
        risk_score = (
            self._risk_scorer.calculate_risk_score(business_info)
            if self._risk_scorer is not None
            else None
        )

        result = RatingResult(
            breakdowns=list(breakdowns),
            total_premium=calculate_total_premium(breakdowns),
            effective_date=effective_date,
            warnings=warnings,
            risk_score=risk_score,
        )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Rated %d payroll lines for %r: total premium %.2f (%d warnings, %.1fms)",
            len(breakdowns),
            business_info.name,
            result.total_premium,
            len(warnings),
            elapsed_ms,
        )
        return Ok(result)

    @beartype
    async def _rate_line(
        self,
        line: PayrollLine,
        business_info: BusinessInfo,
        effective_date: date,
        schedule_credit: float,
    ) -> PremiumBreakdown:
        """Rate one payroll line; never raises."""
        location = location_for_line(line, business_info.locations)
        lookup, resolution = await asyncio.gather(
            self._rate_table.lookup(line.state_code, line.class_code, effective_date),
            self._territory_resolver.resolve(location, line.state_code, effective_date),
        )
        warnings = [w for w in (lookup.warning, resolution.warning) if w]
        base_rate = lookup.rate.base_rate
        multiplier = resolution.territory.rate_multiplier

        if line.employee_count <= 0:
            logger.warning(
                "Rating degraded for %s-%s: employee count %d",
                line.state_code,
                line.class_code,
                line.employee_count,
            )
            return self._zero_premium_breakdown(
                line,
                base_rate,
                resolution,
                [*warnings, "Premium defaulted to 0: no employees reported"],
            )

        try:
            manual_premium = calculate_manual_premium(line.annual_payroll, base_rate)
            territory_adjusted = manual_premium * multiplier
            experience_mod = ExperienceModCalculator.compute(
                business_info.loss_history,
                manual_premium * self._expected_loss_ratio,
                line.annual_payroll,
            )
        except (ArithmeticError, ValueError) as e:
            logger.error(
                "Rating degraded for %s-%s: %s", line.state_code, line.class_code, e
            )
            return self._zero_premium_breakdown(
                line, base_rate, resolution, [*warnings, f"Premium defaulted to 0: {e}"]
            )

        modified_premium = territory_adjusted * experience_mod
        final_premium = modified_premium * (1 - schedule_credit)

        return PremiumBreakdown(
            state_code=line.state_code,
            class_code=line.class_code,
            payroll=line.annual_payroll,
            base_rate=base_rate,
            manual_premium=manual_premium,
            modified_premium=modified_premium,
            final_premium=final_premium,
            territory_code=resolution.territory.territory_code,
            territory_multiplier=multiplier,
            experience_mod=experience_mod,
            schedule_credit=schedule_credit,
            warnings=warnings,
        )

    @staticmethod
    def _zero_premium_breakdown(
        line: PayrollLine,
        base_rate: float,
        resolution: TerritoryResolution,
        warnings: list[str],
    ) -> PremiumBreakdown:
        return PremiumBreakdown(
            state_code=line.state_code,
            class_code=line.class_code,
            payroll=line.annual_payroll,
            base_rate=base_rate,
            manual_premium=0.0,
            modified_premium=0.0,
            final_premium=0.0,
            territory_code=resolution.territory.territory_code,
            territory_multiplier=resolution.territory.rate_multiplier,
            warnings=warnings,
        )
