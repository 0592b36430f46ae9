"""API v1 router aggregation."""

from fastapi import APIRouter

from .health import router as health_router
from .ratings import router as ratings_router

# Create main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(health_router, tags=["health"])
router.include_router(ratings_router, tags=["ratings"])


__all__ = ["router"]
