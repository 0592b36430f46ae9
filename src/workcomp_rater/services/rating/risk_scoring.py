"""Composite 0-100 risk score for a submission.

The score is informational: it is reported next to the premium and feeds
the optimization advisor, but it does not change any premium figure.
"""

from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

from ...models.business import BusinessInfo, LossRecord, RiskControl, SafetyProgram
from ...models.rating import RiskFactor, RiskScore, RiskScoreComponents
from .business_rules import parse_loss_date

DAYS_PER_MONTH = 30

SAFETY_WEIGHT = 0.30
LOSS_WEIGHT = 0.25
CONTROL_WEIGHT = 0.25
INDUSTRY_WEIGHT = 0.20

HIGH_RISK_KEYWORDS = ("construction", "manufacturing", "transportation")
LOW_RISK_KEYWORDS = ("office", "clerical", "professional")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _months_since(then: date, as_of: date) -> float:
    return (as_of - then).days / DAYS_PER_MONTH


def _recency_bonus(then: date | None, as_of: date) -> int:
    """+20 for a review within 3 months, +10 within 6."""
    if then is None:
        return 0
    months = _months_since(then, as_of)
    if months <= 3:
        return 20
    if months <= 6:
        return 10
    return 0


@beartype
class RiskScorer:
    """Weighted safety / loss / control / industry scoring."""

    def __init__(self, as_of: date | None = None) -> None:
        """Initialize risk scorer.

        Args:
            as_of: Date review and loss recency is measured from (default today)
        """
        self._as_of = as_of

    @property
    def as_of(self) -> date:
        return self._as_of or date.today()

    @beartype
    def evaluate_safety_programs(self, programs: Sequence[SafetyProgram]) -> float:
        if not programs:
            return 50.0

        scores = []
        for program in programs:
            score = 50
            if program.status == "active":
                score += 30
            elif program.status == "under_review":
                score += 15
            score += _recency_bonus(program.last_review_date, self.as_of)
            scores.append(score)

        return min(100.0, sum(scores) / len(programs))

    @beartype
    def evaluate_loss_history(self, history: Sequence[LossRecord]) -> float:
        if not history:
            return 85.0

        score = 100.0
        total_losses = sum(loss.amount for loss in history)

        if total_losses > 500_000:
            score -= 30
        elif total_losses > 250_000:
            score -= 20
        elif total_losses > 100_000:
            score -= 10

        recent = 0
        for loss in history:
            loss_date = parse_loss_date(loss.loss_date)
            if loss_date is not None and _months_since(loss_date, self.as_of) <= 12:
                recent += 1
        score -= recent * 5

        open_claims = sum(1 for loss in history if loss.status == "open")
        score -= open_claims * 8

        return max(0.0, score)

    @beartype
    def evaluate_risk_controls(self, controls: Sequence[RiskControl]) -> float:
        if not controls:
            return 50.0

        scores = []
        for control in controls:
            if control.effectiveness == "high":
                score = 80
            elif control.effectiveness == "medium":
                score = 60
            else:
                score = 40
            score += _recency_bonus(control.last_assessment_date, self.as_of)
            scores.append(score)

        return min(100.0, sum(scores) / len(controls))

    @beartype
    def evaluate_industry_risk(self, business: BusinessInfo) -> float:
        score = 75.0
        description = business.description.lower()

        if any(keyword in description for keyword in HIGH_RISK_KEYWORDS):
            score -= 15
        if any(keyword in description for keyword in LOW_RISK_KEYWORDS):
            score += 15

        if business.years_in_business > 10:
            score += 10
        elif business.years_in_business > 5:
            score += 5
        elif business.years_in_business < 2:
            score -= 5

        return min(100.0, max(0.0, score))

    @beartype
    def calculate_risk_score(self, business: BusinessInfo) -> RiskScore:
        """Score a submission.

        Args:
            business: Submitted business data

        Returns:
            RiskScore with component scores and flagged factors
        """
        safety_score = self.evaluate_safety_programs(business.safety_programs)
        loss_score = self.evaluate_loss_history(business.loss_history)
        control_score = self.evaluate_risk_controls(business.risk_controls)
        industry_score = self.evaluate_industry_risk(business)

        factors = []
        if safety_score < 60:
            factors.append(
                RiskFactor(
                    name="Inadequate Safety Programs",
                    impact=-10,
                    description="Implement comprehensive safety training and monitoring",
                )
            )
        if loss_score < 70:
            factors.append(
                RiskFactor(
                    name="Adverse Loss History",
                    impact=-15,
                    description="Recent claims indicate need for improved risk management",
                )
            )
        if control_score < 65:
            factors.append(
                RiskFactor(
                    name="Risk Control Deficiencies",
                    impact=-12,
                    description="Strengthen workplace safety measures and protocols",
                )
            )

        total = (
            safety_score * SAFETY_WEIGHT
            + loss_score * LOSS_WEIGHT
            + control_score * CONTROL_WEIGHT
            + industry_score * INDUSTRY_WEIGHT
        )

        return RiskScore(
            total=round_half_up(total),
            components=RiskScoreComponents(
                safety_score=safety_score,
                loss_score=loss_score,
                control_score=control_score,
                industry_score=industry_score,
            ),
            factors=factors,
        )
