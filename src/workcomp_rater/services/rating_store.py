"""Sink for saved ratings."""

from typing import Protocol, runtime_checkable
from uuid import UUID

from beartype import beartype

from ..core.result_types import Err, Ok, Result
from ..models.rating import RatingResult, SavedRating


@runtime_checkable
class RatingSink(Protocol):
    """Stores completed ratings."""

    async def save_rating(
        self, business_name: str, result: RatingResult
    ) -> Result[SavedRating, str]: ...

    async def get_rating(self, rating_id: UUID) -> SavedRating | None: ...


@beartype
class InMemoryRatingStore:
    """Process-local rating sink."""

    def __init__(self) -> None:
        self._ratings: dict[UUID, SavedRating] = {}

    @beartype
    async def save_rating(
        self, business_name: str, result: RatingResult
    ) -> Result[SavedRating, str]:
        saved = SavedRating(business_name=business_name, result=result)
        if saved.rating_id in self._ratings:
            return Err(f"Rating {saved.rating_id} already saved")
        self._ratings[saved.rating_id] = saved
        return Ok(saved)

    @beartype
    async def get_rating(self, rating_id: UUID) -> SavedRating | None:
        return self._ratings.get(rating_id)

    def __len__(self) -> int:
        return len(self._ratings)
