"""Experience modification factor.

Each claim is split into a primary portion (capped per claim) and an excess
portion. Primary dollars carry twice the weight of excess dollars, so one
large claim moves the mod far less than several small ones of the same
total. The employer's own experience is blended with unity by a
payroll-based credibility factor.
"""

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

from ...models.business import LossRecord

PRIMARY_LOSS_LIMIT = 15_000.0
PRIMARY_WEIGHT = 0.20
EXCESS_WEIGHT = 0.10
BALLAST_RATIO = 0.05
FULL_CREDIBILITY_PAYROLL = 5_000_000.0

MIN_EXPERIENCE_MOD = 0.75
MAX_EXPERIENCE_MOD = 2.00


@beartype
class ExperienceModCalculator:
    """Converts loss history, expected losses and payroll into a mod."""

    @beartype
    @staticmethod
    def split_losses(loss_history: Iterable[LossRecord]) -> tuple[float, float]:
        """Return (primary, excess) totals across all claims, open or closed.

        Records without a positive amount are not counted.
        """
        primary = 0.0
        excess = 0.0
        for loss in loss_history:
            if loss.amount <= 0:
                continue
            if loss.amount <= PRIMARY_LOSS_LIMIT:
                primary += loss.amount
            else:
                primary += PRIMARY_LOSS_LIMIT
                excess += loss.amount - PRIMARY_LOSS_LIMIT
        return primary, excess

    @beartype
    @staticmethod
    def credibility(payroll: float) -> float:
        """Credibility rises with payroll and reaches 1.0 at $5M."""
        if payroll <= 0:
            return 0.0
        return min(1.0, math.sqrt(payroll / FULL_CREDIBILITY_PAYROLL))

    @beartype
    @staticmethod
    def clamp(mod: float) -> float:
        """Round half-up to 2 decimals and constrain to [0.75, 2.00]."""
        # Bounds sit on the 0.01 grid, so clamping first rounds identically
        bounded = min(MAX_EXPERIENCE_MOD, max(MIN_EXPERIENCE_MOD, mod))
        return float(
            Decimal(repr(bounded)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        )

    @beartype
    @classmethod
    def compute(
        cls,
        loss_history: Iterable[LossRecord],
        expected_annual_losses: float,
        payroll: float,
    ) -> float:
        """Calculate the experience mod.

        Args:
            loss_history: Historical claims
            expected_annual_losses: Expected losses for the employer's size
            payroll: Annual payroll driving credibility

        Returns:
            Mod in [0.75, 2.00], rounded to 2 decimals
        """
        primary, excess = cls.split_losses(loss_history)
        credibility = cls.credibility(payroll)

        expected_weighted = (
            expected_annual_losses * PRIMARY_WEIGHT * credibility
            + expected_annual_losses * BALLAST_RATIO
        )
        # No expectation to compare against: stay at unity
        if expected_weighted <= 0:
            return cls.clamp(1.0)

        actual_ratio = (
            primary * PRIMARY_WEIGHT + excess * EXCESS_WEIGHT
        ) / expected_weighted

        mod = 1.0 + (actual_ratio - 1.0) * credibility
        return cls.clamp(mod)
