"""Domain models for workers' compensation rating."""

from .base import BaseModelConfig, StateScopedModel
from .business import (
    Address,
    BusinessInfo,
    LossRecord,
    PayrollLine,
    PremiumModifiers,
    RiskControl,
    SafetyProgram,
    SupplementalCoverage,
    WorkforceMetrics,
)
from .rating import (
    OptimizationSuggestion,
    PremiumBreakdown,
    PremiumOptimization,
    RateLookup,
    RatingResult,
    RiskFactor,
    RiskScore,
    RiskScoreComponents,
    SavedRating,
    TerritoryResolution,
    ValidationReport,
)
from .reference import ClassCodeRate, Territory, ZipRange

__all__ = [
    "BaseModelConfig",
    "StateScopedModel",
    # Business submission
    "Address",
    "BusinessInfo",
    "LossRecord",
    "PayrollLine",
    "PremiumModifiers",
    "RiskControl",
    "SafetyProgram",
    "SupplementalCoverage",
    "WorkforceMetrics",
    # Reference data
    "ClassCodeRate",
    "Territory",
    "ZipRange",
    # Rating outputs
    "OptimizationSuggestion",
    "PremiumBreakdown",
    "PremiumOptimization",
    "RateLookup",
    "RatingResult",
    "RiskFactor",
    "RiskScore",
    "RiskScoreComponents",
    "SavedRating",
    "TerritoryResolution",
    "ValidationReport",
]
