"""Health check endpoint."""

from beartype import beartype
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ... import __version__
from ...core.config import Settings, get_settings
from ...services.reference_data import InMemoryReferenceStore
from ..dependencies import get_reference_store

router = APIRouter()


class HealthResponse(BaseModel):
    """Service health and loaded reference data."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    status: str = Field(..., pattern=r"^(healthy|degraded)$")
    version: str
    environment: str
    class_code_rates: int = Field(..., ge=0)
    territories: int = Field(..., ge=0)


@router.get("/health", response_model=HealthResponse)
@beartype
async def health_check(
    settings: Settings = Depends(get_settings),
    reference_store: InMemoryReferenceStore = Depends(get_reference_store),
) -> HealthResponse:
    """Report service status; degraded when no rates are loaded."""
    return HealthResponse(
        status="healthy" if reference_store.rate_count else "degraded",
        version=__version__,
        environment=settings.api_env,
        class_code_rates=reference_store.rate_count,
        territories=reference_store.territory_count,
    )
