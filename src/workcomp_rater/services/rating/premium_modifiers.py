"""Rating with underwriter-supplied modifiers.

Unlike ``RatingEngine``, which derives the experience mod and schedule
credit from the submission, this path applies a ``PremiumModifiers`` set
entered by an underwriter: experience mod, schedule credit or debit, safety
credit and flat-priced supplemental coverages.
"""

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from beartype import beartype

from ...models.business import Address, PayrollLine, PremiumModifiers
from ...models.rating import PremiumBreakdown
from .rate_tables import RateTable
from .territory_management import TerritoryResolver


@beartype
def calculate_manual_premium(payroll: float, base_rate: float) -> float:
    """Payroll-proportional premium: rate is per $100 of payroll."""
    return (payroll / 100) * base_rate


@beartype
def calculate_total_premium(breakdowns: Iterable[PremiumBreakdown]) -> float:
    return sum((breakdown.final_premium for breakdown in breakdowns), 0.0)


@beartype
def supplemental_premium(
    modifiers: PremiumModifiers, coverage_rates: Mapping[str, float] | None = None
) -> float:
    """Sum of selected supplemental coverages.

    A rate on file for the coverage id takes precedence over the premium
    carried on the selection.
    """
    rates = coverage_rates or {}
    return sum(
        (
            rates.get(coverage.id, coverage.premium)
            for coverage in modifiers.supplemental_coverages
            if coverage.selected
        ),
        0.0,
    )


@beartype
class ModifiedPremiumCalculator:
    """Applies a fixed modifier set to payroll lines."""

    def __init__(
        self,
        rate_table: RateTable,
        territory_resolver: TerritoryResolver,
        coverage_rates: Mapping[str, float] | None = None,
    ) -> None:
        """Initialize calculator.

        Args:
            rate_table: Class code rate lookup
            territory_resolver: Territory lookup
            coverage_rates: Supplemental coverage premiums on file, by id
        """
        self._rate_table = rate_table
        self._territory_resolver = territory_resolver
        self._coverage_rates = dict(coverage_rates or {})

    @beartype
    @staticmethod
    def apply_modifiers(
        manual_premium: float,
        modifiers: PremiumModifiers,
        territory_multiplier: float = 1.0,
        include_supplemental: bool = True,
        coverage_rates: Mapping[str, float] | None = None,
    ) -> float:
        """Apply territory, experience mod, credits and supplemental premium.

        Args:
            manual_premium: Premium before modifiers
            modifiers: Underwriter modifiers
            territory_multiplier: Multiplier of the rated territory
            include_supplemental: Whether to add selected supplemental premium
            coverage_rates: Supplemental coverage premiums on file, by id

        Returns:
            Modified premium
        """
        premium = manual_premium * territory_multiplier
        premium *= modifiers.experience_mod
        premium *= 1 - modifiers.schedule_credit
        premium *= 1 - modifiers.safety_credit
        if include_supplemental:
            premium += supplemental_premium(modifiers, coverage_rates)
        return premium

    @beartype
    async def calculate_state_premium(
        self,
        payroll_lines: Sequence[PayrollLine],
        modifiers: PremiumModifiers,
        state_code: str,
        effective_date: date,
        location: Address | None = None,
    ) -> list[PremiumBreakdown]:
        """Rate every payroll line in one state with the given modifiers.

        Supplemental coverage premium is carried on the first line of the
        state only, so each endorsement is counted once in the total.
        """
        state_code = state_code.strip().upper()
        lines = [line for line in payroll_lines if line.state_code == state_code]
        if not lines:
            return []

        address = location or Address(state=state_code)
        lookups, resolution = await asyncio.gather(
            asyncio.gather(
                *(
                    self._rate_table.lookup(line.state_code, line.class_code, effective_date)
                    for line in lines
                )
            ),
            self._territory_resolver.resolve(address, state_code, effective_date),
        )

        multiplier = resolution.territory.rate_multiplier
        breakdowns = []
        for index, (line, lookup) in enumerate(zip(lines, lookups)):
            manual = calculate_manual_premium(line.annual_payroll, lookup.rate.base_rate)
            modified = manual * multiplier * modifiers.experience_mod
            final = self.apply_modifiers(
                manual,
                modifiers,
                territory_multiplier=multiplier,
                include_supplemental=index == 0,
                coverage_rates=self._coverage_rates,
            )
            warnings = [w for w in (lookup.warning, resolution.warning) if w]
            breakdowns.append(
                PremiumBreakdown(
                    state_code=line.state_code,
                    class_code=line.class_code,
                    payroll=line.annual_payroll,
                    base_rate=lookup.rate.base_rate,
                    manual_premium=manual,
                    modified_premium=modified,
                    final_premium=final,
                    territory_code=resolution.territory.territory_code,
                    territory_multiplier=multiplier,
                    experience_mod=modifiers.experience_mod,
                    schedule_credit=modifiers.schedule_credit,
                    warnings=warnings,
                )
            )
        return breakdowns
