"""User-entered business data consumed by the rating engine.

Negative payroll and loss amounts are rejected on construction. Zero
amounts, employee counts and modifier ranges are checked by the validation
pass in ``services.rating.business_rules`` so that they can be reported as
field-level messages.
"""

from datetime import date

from pydantic import Field

from .base import BaseModelConfig, StateScopedModel


class PayrollLine(StateScopedModel):
    """Payroll reported for one state / class code combination."""

    class_code: str = Field(..., max_length=10, description="Class code, e.g. 8810")
    annual_payroll: float = Field(..., ge=0.0, description="Annual payroll in dollars")
    employee_count: int = Field(..., description="Employees in this class")


class LossRecord(BaseModelConfig):
    """One historical claim."""

    loss_date: str = Field(..., description="ISO-8601 date of loss")
    amount: float = Field(..., ge=0.0, description="Incurred amount in dollars")
    status: str = Field(default="closed", description="open or closed")
    claim_number: str | None = Field(default=None, max_length=50)


class WorkforceMetrics(BaseModelConfig):
    """Workforce stability indicators used for schedule credits."""

    turnover_rate: float = Field(default=1.0, ge=0.0, description="Annual turnover, 0-1")
    avg_tenure: float = Field(default=0.0, ge=0.0, description="Average tenure in years")
    training_hours_per_year: float = Field(default=0.0, ge=0.0)


class SafetyProgram(BaseModelConfig):
    """A workplace safety program."""

    name: str = Field(..., min_length=1, max_length=200)
    status: str = Field(
        default="active", pattern="^(active|inactive|under_review)$"
    )
    last_review_date: date | None = Field(default=None)


class RiskControl(BaseModelConfig):
    """A risk control measure and its assessed effectiveness."""

    name: str = Field(..., min_length=1, max_length=200)
    effectiveness: str = Field(default="medium", pattern="^(high|medium|low)$")
    last_assessment_date: date | None = Field(default=None)


class Address(BaseModelConfig):
    """Business location."""

    street1: str = Field(default="", max_length=200)
    street2: str | None = Field(default=None, max_length=200)
    city: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=2)
    zip_code: str = Field(default="", max_length=10)


class SupplementalCoverage(BaseModelConfig):
    """Optional coverage endorsement priced as a flat premium."""

    id: str = Field(..., min_length=1, max_length=50)
    selected: bool = Field(default=False)
    premium: float = Field(default=0.0, ge=0.0)


class PremiumModifiers(BaseModelConfig):
    """Underwriter-entered modifiers.

    ``schedule_credit`` is negative for a debit. Ranges are enforced by the
    validation pass: experience mod in [0.75, 2.00], schedule credit within
    +/-0.25.
    """

    experience_mod: float = Field(default=1.0)
    schedule_credit: float = Field(default=0.0)
    safety_credit: float = Field(default=0.0, ge=0.0, lt=1.0)
    supplemental_coverages: tuple[SupplementalCoverage, ...] = Field(default=())


class BusinessInfo(BaseModelConfig):
    """Aggregate submitted for rating."""

    name: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=2000)
    years_in_business: float = Field(default=0.0, ge=0.0)
    payroll_lines: tuple[PayrollLine, ...] = Field(default=())
    loss_history: tuple[LossRecord, ...] = Field(default=())
    workforce_metrics: WorkforceMetrics = Field(default_factory=WorkforceMetrics)
    safety_programs: tuple[SafetyProgram, ...] = Field(default=())
    risk_controls: tuple[RiskControl, ...] = Field(default=())
    locations: tuple[Address, ...] = Field(default=())
    modifiers: PremiumModifiers | None = Field(default=None)
