"""FastAPI dependencies for the rating service.

Reference data, the rating sink and the engine are process-wide singletons
built from settings on first use. Tests swap them through
``app.dependency_overrides``.
"""

import logging

from beartype import beartype
from fastapi import Depends

from ..core.config import Settings, get_settings
from ..services.optimization import RulesOptimizationAdvisor
from ..services.rating.rating_engine import RatingEngine
from ..services.rating.risk_scoring import RiskScorer
from ..services.rating_service import RatingService
from ..services.rating_store import InMemoryRatingStore
from ..services.reference_data import InMemoryReferenceStore

logger = logging.getLogger(__name__)

_reference_store: InMemoryReferenceStore | None = None
_rating_store: InMemoryRatingStore | None = None


@beartype
def get_reference_store(
    settings: Settings = Depends(get_settings),
) -> InMemoryReferenceStore:
    """Provide the reference data store.

    Loaded from ``reference_data_path`` when set; otherwise empty, in which
    case every line rates at the default rate with a warning.
    """
    global _reference_store
    if _reference_store is None:
        if settings.reference_data_path:
            _reference_store = InMemoryReferenceStore.from_json_file(
                settings.reference_data_path
            )
        else:
            logger.warning("No reference data configured; rating with defaults")
            _reference_store = InMemoryReferenceStore()
    return _reference_store


@beartype
def get_rating_store() -> InMemoryRatingStore:
    """Provide the rating sink."""
    global _rating_store
    if _rating_store is None:
        _rating_store = InMemoryRatingStore()
    return _rating_store


@beartype
def get_rating_engine(
    settings: Settings = Depends(get_settings),
    reference_store: InMemoryReferenceStore = Depends(get_reference_store),
) -> RatingEngine:
    """Provide a rating engine configured from settings.

    Args:
        settings: Application settings
        reference_store: Rates and territories

    Returns:
        RatingEngine: Engine reading from the reference store
    """
    return RatingEngine(
        rate_source=reference_store,
        territory_source=reference_store,
        expected_loss_ratio=settings.expected_loss_ratio,
        default_effective_date=settings.default_effective_date,
        lookup_timeout_seconds=settings.reference_lookup_timeout_seconds,
        risk_scorer=RiskScorer() if settings.enable_risk_scoring else None,
    )


@beartype
def get_rating_service(
    engine: RatingEngine = Depends(get_rating_engine),
    rating_store: InMemoryRatingStore = Depends(get_rating_store),
) -> RatingService:
    """Provide Rating service instance.

    Args:
        engine: Rating engine
        rating_store: Rating sink

    Returns:
        RatingService: Service instance for rating operations
    """
    return RatingService(engine, rating_store, advisor=RulesOptimizationAdvisor())


@beartype
def reset_dependencies() -> None:
    """Drop cached stores (for testing)."""
    global _reference_store, _rating_store
    _reference_store = None
    _rating_store = None
