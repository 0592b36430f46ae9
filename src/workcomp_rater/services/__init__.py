"""Business logic service layer."""

from ..core.result_types import Err, Ok, Result
from .optimization import (
    FallbackOptimizationAdvisor,
    OptimizationAdvisor,
    RulesOptimizationAdvisor,
)
from .rating_service import RatingService
from .rating_store import InMemoryRatingStore, RatingSink
from .reference_data import InMemoryReferenceStore

__all__ = [
    "Result",
    "Ok",
    "Err",
    "RatingService",
    "RatingSink",
    "InMemoryRatingStore",
    "InMemoryReferenceStore",
    "OptimizationAdvisor",
    "FallbackOptimizationAdvisor",
    "RulesOptimizationAdvisor",
]
