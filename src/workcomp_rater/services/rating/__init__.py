"""Rating engine services package.

This package provides the workers' compensation rating pipeline:
- Class code rate lookup with zero-rate fallback
- Territory resolution with a deterministic fallback chain
- Experience modification from loss history
- Schedule credits for workforce and safety practices
- Business rule validation before rating
- Underwriter-modifier rating and risk scoring
"""

from .business_rules import BusinessRuleViolation, RatingValidator
from .experience_mod import ExperienceModCalculator
from .premium_modifiers import (
    ModifiedPremiumCalculator,
    calculate_manual_premium,
    calculate_total_premium,
)
from .rate_tables import ClassCodeRateSource, RateTable
from .rating_engine import RatingEngine
from .risk_scoring import RiskScorer
from .schedule_credit import ScheduleCreditCalculator
from .territory_management import TerritoryResolver, TerritorySource

__all__ = [
    # Main Engine
    "RatingEngine",
    # Core calculators
    "ExperienceModCalculator",
    "ScheduleCreditCalculator",
    "ModifiedPremiumCalculator",
    "calculate_manual_premium",
    "calculate_total_premium",
    "RiskScorer",
    # Reference lookups
    "RateTable",
    "ClassCodeRateSource",
    "TerritoryResolver",
    "TerritorySource",
    # Business Rules
    "RatingValidator",
    "BusinessRuleViolation",
]
