"""Rating API endpoints."""

from uuid import UUID

from beartype import beartype
from fastapi import APIRouter, Depends, HTTPException

from ...models.rating import ValidationReport
from ...schemas.rating import (
    ClassificationReviewResponse,
    ModifiedRatingResponse,
    RatingRequest,
    RatingResponse,
)
from ...services.rating.premium_modifiers import calculate_total_premium
from ...services.rating_service import RatingService
from ..dependencies import get_rating_service

router = APIRouter(prefix="/ratings", tags=["ratings"])


@beartype
def _raise_for_error(error: ValidationReport | str) -> None:
    # Invalid submissions are 422 with the full report; contract errors 400
    if isinstance(error, ValidationReport):
        raise HTTPException(status_code=422, detail=error.model_dump())
    raise HTTPException(status_code=400, detail=error)


@router.post("/calculate", response_model=RatingResponse)
@beartype
async def calculate_rating(
    request: RatingRequest,
    rating_service: RatingService = Depends(get_rating_service),
) -> RatingResponse:
    """Validate, rate and save a submission."""
    result = await rating_service.rate(request.business, request.effective_date)

    if result.is_err():
        _raise_for_error(result.err_value)

    saved = result.ok_value
    return RatingResponse(
        rating_id=saved.rating_id,
        business_name=saved.business_name,
        created_at=saved.created_at,
        result=saved.result,
    )


@router.post("/validate", response_model=ClassificationReviewResponse)
@beartype
async def validate_rating(
    request: RatingRequest,
    rating_service: RatingService = Depends(get_rating_service),
) -> ClassificationReviewResponse:
    """Run the validation pass and class code review without rating."""
    report = await rating_service.review_classifications(
        request.business, request.effective_date
    )
    return ClassificationReviewResponse(is_valid=report.is_valid, report=report)


@router.post("/calculate-with-modifiers", response_model=ModifiedRatingResponse)
@beartype
async def calculate_with_modifiers(
    request: RatingRequest,
    rating_service: RatingService = Depends(get_rating_service),
) -> ModifiedRatingResponse:
    """Rate with the experience mod and credits supplied on the submission."""
    result = await rating_service.rate_with_modifiers(
        request.business, request.effective_date
    )

    if result.is_err():
        _raise_for_error(result.err_value)

    breakdowns = result.ok_value
    return ModifiedRatingResponse(
        breakdowns=breakdowns, total_premium=calculate_total_premium(breakdowns)
    )


@router.get("/{rating_id}", response_model=RatingResponse)
@beartype
async def get_rating(
    rating_id: UUID,
    rating_service: RatingService = Depends(get_rating_service),
) -> RatingResponse:
    """Get a saved rating by ID."""
    saved = await rating_service.get_rating(rating_id)
    if saved is None:
        raise HTTPException(status_code=404, detail="Rating not found")

    return RatingResponse(
        rating_id=saved.rating_id,
        business_name=saved.business_name,
        created_at=saved.created_at,
        result=saved.result,
    )
