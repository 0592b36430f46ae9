"""Request and response schemas for the rating API."""

from .rating import (
    ClassificationReviewResponse,
    ModifiedRatingResponse,
    RatingRequest,
    RatingResponse,
)

__all__ = [
    "RatingRequest",
    "RatingResponse",
    "ModifiedRatingResponse",
    "ClassificationReviewResponse",
]
