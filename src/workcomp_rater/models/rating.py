"""Rating outputs.

A rating run produces one ``PremiumBreakdown`` per payroll line with every
intermediate figure retained for audit, and a ``RatingResult`` whose total
is the sum of the breakdowns' final premiums.
"""

from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from pydantic import Field, computed_field

from .base import BaseModelConfig
from .reference import ClassCodeRate, Territory


class RateLookup(BaseModelConfig):
    """Class code rate plus the warning raised when it had to be defaulted."""

    rate: ClassCodeRate
    warning: str | None = Field(default=None)

    @property
    def defaulted(self) -> bool:
        return self.warning is not None


class TerritoryResolution(BaseModelConfig):
    """Territory chosen for an address and the rule that chose it."""

    territory: Territory
    match: str = Field(..., pattern="^(city|zip|fallback|first|synthetic)$")
    warning: str | None = Field(default=None)


class PremiumBreakdown(BaseModelConfig):
    """Premium for a single payroll line."""

    state_code: str
    class_code: str
    payroll: float
    base_rate: float
    manual_premium: float
    modified_premium: float
    final_premium: float
    territory_code: str = Field(default="")
    territory_multiplier: float = Field(default=1.0)
    experience_mod: float = Field(default=1.0)
    schedule_credit: float = Field(default=0.0)
    warnings: list[str] = Field(default_factory=list)


class RiskFactor(BaseModelConfig):
    """Named contributor to the risk score."""

    name: str
    impact: int
    description: str


class RiskScoreComponents(BaseModelConfig):
    safety_score: float = Field(..., ge=0, le=100)
    loss_score: float = Field(..., ge=0, le=100)
    control_score: float = Field(..., ge=0, le=100)
    industry_score: float = Field(..., ge=0, le=100)


class RiskScore(BaseModelConfig):
    """0-100 composite; higher means a better risk."""

    total: int = Field(..., ge=0, le=100)
    components: RiskScoreComponents
    factors: list[RiskFactor] = Field(default_factory=list)


class OptimizationSuggestion(BaseModelConfig):
    type: str = Field(..., pattern="^(credit|modification|program)$")
    description: str
    potential_savings: float = Field(default=0.0, ge=0.0)
    implementation: str = Field(default="")
    timeframe: str = Field(
        default="short-term", pattern="^(immediate|short-term|long-term)$"
    )
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class PremiumOptimization(BaseModelConfig):
    """Advisory narrative attached to a rating; never alters premiums."""

    suggestions: list[OptimizationSuggestion] = Field(default_factory=list)
    total_potential_savings: float = Field(default=0.0, ge=0.0)
    prioritized_actions: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RatingResult(BaseModelConfig):
    """Complete output of one rating run."""

    breakdowns: list[PremiumBreakdown]
    total_premium: float
    effective_date: date
    warnings: list[str] = Field(default_factory=list)
    risk_score: RiskScore | None = Field(default=None)
    optimizations: list[str] = Field(default_factory=list)


class ValidationReport(BaseModelConfig):
    """Outcome of the pre-rating validation pass."""

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not self.errors


class SavedRating(BaseModelConfig):
    """Rating as handed to the persistence sink."""

    rating_id: UUID = Field(default_factory=uuid4)
    business_name: str = Field(default="")
    result: RatingResult
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
