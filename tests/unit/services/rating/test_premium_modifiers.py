"""Unit tests for rating with underwriter-supplied modifiers."""

from datetime import date

import pytest

from workcomp_rater.models import (
    Address,
    PayrollLine,
    PremiumBreakdown,
    PremiumModifiers,
    SupplementalCoverage,
)
from workcomp_rater.services.rating.premium_modifiers import (
    ModifiedPremiumCalculator,
    calculate_manual_premium,
    calculate_total_premium,
    supplemental_premium,
)
from workcomp_rater.services.rating.rate_tables import RateTable
from workcomp_rater.services.rating.territory_management import TerritoryResolver
from workcomp_rater.services.reference_data import InMemoryReferenceStore


@pytest.fixture
def calculator(reference_store: InMemoryReferenceStore) -> ModifiedPremiumCalculator:
    return ModifiedPremiumCalculator(
        RateTable(reference_store), TerritoryResolver(reference_store)
    )


@pytest.fixture
def modifiers() -> PremiumModifiers:
    return PremiumModifiers(
        experience_mod=1.2,
        schedule_credit=0.1,
        safety_credit=0.05,
        supplemental_coverages=(
            SupplementalCoverage(id="uslh", selected=True, premium=250.0),
            SupplementalCoverage(id="stop-gap", selected=False, premium=400.0),
        ),
    )


class TestManualPremium:
    def test_rate_is_per_hundred_dollars(self):
        assert calculate_manual_premium(100_000.0, 0.35) == pytest.approx(350.0)

    def test_total_premium_sums_final_premiums(self):
        breakdowns = [
            PremiumBreakdown(
                state_code="CA",
                class_code=code,
                payroll=1.0,
                base_rate=1.0,
                manual_premium=premium,
                modified_premium=premium,
                final_premium=premium,
            )
            for code, premium in (("8810", 120.5), ("5403", 879.5))
        ]

        assert calculate_total_premium(breakdowns) == pytest.approx(1000.0)
        assert calculate_total_premium([]) == 0.0


class TestApplyModifiers:
    """Test the modifier order on a single premium."""

    def test_only_selected_coverages_are_added(self, modifiers: PremiumModifiers):
        assert supplemental_premium(modifiers) == 250.0

    def test_rate_on_file_overrides_selection_premium(
        self, modifiers: PremiumModifiers
    ):
        assert supplemental_premium(modifiers, {"uslh": 300.0}) == 300.0

    def test_apply_modifiers(self, modifiers: PremiumModifiers):
        premium = ModifiedPremiumCalculator.apply_modifiers(
            1000.0, modifiers, territory_multiplier=1.1
        )

        # 1000 * 1.1 * 1.2 * 0.9 * 0.95 + 250
        assert premium == pytest.approx(1378.6)

    def test_schedule_debit_increases_premium(self):
        premium = ModifiedPremiumCalculator.apply_modifiers(
            1000.0, PremiumModifiers(schedule_credit=-0.1)
        )

        assert premium == pytest.approx(1100.0)


class TestCalculateStatePremium:
    """Test per-state rating with modifiers."""

    @pytest.mark.asyncio
    async def test_only_lines_in_state_are_rated(
        self,
        calculator: ModifiedPremiumCalculator,
        modifiers: PremiumModifiers,
        effective_date: date,
    ):
        lines = [
            PayrollLine(
                state_code="CA",
                class_code="8810",
                annual_payroll=100_000.0,
                employee_count=2,
            ),
            PayrollLine(
                state_code="TX",
                class_code="8810",
                annual_payroll=100_000.0,
                employee_count=2,
            ),
            PayrollLine(
                state_code="CA",
                class_code="5403",
                annual_payroll=50_000.0,
                employee_count=2,
            ),
        ]

        breakdowns = await calculator.calculate_state_premium(
            lines,
            modifiers,
            "ca",
            effective_date,
            location=Address(state="CA", zip_code="90012"),
        )

        assert [b.class_code for b in breakdowns] == ["8810", "5403"]
        assert all(b.territory_code == "CA-LA" for b in breakdowns)

    @pytest.mark.asyncio
    async def test_supplemental_premium_counted_once(
        self,
        calculator: ModifiedPremiumCalculator,
        modifiers: PremiumModifiers,
        effective_date: date,
    ):
        lines = [
            PayrollLine(
                state_code="CA",
                class_code="8810",
                annual_payroll=100_000.0,
                employee_count=2,
            ),
            PayrollLine(
                state_code="CA",
                class_code="8810",
                annual_payroll=100_000.0,
                employee_count=2,
            ),
        ]

        first, second = await calculator.calculate_state_premium(
            lines, modifiers, "CA", effective_date
        )

        assert first.final_premium - second.final_premium == pytest.approx(250.0)

    @pytest.mark.asyncio
    async def test_state_without_lines(
        self,
        calculator: ModifiedPremiumCalculator,
        modifiers: PremiumModifiers,
        effective_date: date,
    ):
        assert (
            await calculator.calculate_state_premium([], modifiers, "NY", effective_date)
            == []
        )
