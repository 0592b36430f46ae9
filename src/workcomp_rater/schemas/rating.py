"""API schemas for rating requests and responses.

Responses carry the domain models unchanged; the wrappers only add the
identifiers and metadata the API needs.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.business import BusinessInfo
from ..models.rating import PremiumBreakdown, RatingResult, ValidationReport

__all__ = [
    "RatingRequest",
    "RatingResponse",
    "ModifiedRatingResponse",
    "ClassificationReviewResponse",
]


class RatingRequest(BaseModel):
    """Submission to rate."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    business: BusinessInfo = Field(..., description="Business to rate")
    effective_date: date | None = Field(
        default=None, description="Rating period (defaults to the configured period)"
    )


class RatingResponse(BaseModel):
    """A saved rating."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    rating_id: UUID
    business_name: str
    created_at: datetime
    result: RatingResult


class ModifiedRatingResponse(BaseModel):
    """Breakdowns rated with underwriter-supplied modifiers."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    breakdowns: list[PremiumBreakdown]
    total_premium: float = Field(..., ge=0)


class ClassificationReviewResponse(BaseModel):
    """Validation pass plus class code review."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    is_valid: bool
    report: ValidationReport
