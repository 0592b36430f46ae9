"""In-memory reference data store.

Implements both ``ClassCodeRateSource`` and ``TerritorySource``. Records are
loaded once and only read afterwards, so concurrent lookups from a rating
run need no locking.
"""

import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any

from beartype import beartype
from pydantic import Field

from ..models.base import BaseModelConfig
from ..models.reference import ClassCodeRate, Territory

logger = logging.getLogger(__name__)


class ReferenceDataDocument(BaseModelConfig):
    """On-disk layout of a reference data file."""

    class_code_rates: list[ClassCodeRate] = Field(default_factory=list)
    territories: list[Territory] = Field(default_factory=list)


@beartype
class InMemoryReferenceStore:
    """Class code rates keyed by (state, class, date); territories by state."""

    def __init__(
        self,
        rates: Iterable[ClassCodeRate] = (),
        territories: Iterable[Territory] = (),
    ) -> None:
        self._rates: dict[tuple[str, str, date], ClassCodeRate] = {}
        self._territories: dict[str, list[Territory]] = {}
        for rate in rates:
            self.add_rate(rate)
        for territory in territories:
            self.add_territory(territory)

    @beartype
    def add_rate(self, rate: ClassCodeRate) -> None:
        """Register a rate; a second rate for the same triple is rejected."""
        key = (rate.state_code, rate.class_code, rate.effective_date)
        if key in self._rates:
            raise ValueError(
                f"Duplicate rate for class {rate.class_code} in {rate.state_code} "
                f"effective {rate.effective_date.isoformat()}"
            )
        self._rates[key] = rate

    @beartype
    def add_territory(self, territory: Territory) -> None:
        """Register a territory; insertion order is the lookup order."""
        self._territories.setdefault(territory.state_code, []).append(territory)

    @property
    def rate_count(self) -> int:
        return len(self._rates)

    @property
    def territory_count(self) -> int:
        return sum(len(territories) for territories in self._territories.values())

    async def get_class_code_rate(
        self, state_code: str, class_code: str, effective_date: date
    ) -> ClassCodeRate | None:
        return self._rates.get((state_code.upper(), class_code, effective_date))

    async def get_territories(
        self, state_code: str, effective_date: date
    ) -> list[Territory]:
        """Territories for the state; undated territories apply to every period."""
        return [
            territory
            for territory in self._territories.get(state_code.upper(), [])
            if territory.effective_date is None
            or territory.effective_date == effective_date
        ]

    @classmethod
    @beartype
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryReferenceStore":
        document = ReferenceDataDocument.model_validate(data)
        return cls(document.class_code_rates, document.territories)

    @classmethod
    @beartype
    def from_json_file(cls, path: str | Path) -> "InMemoryReferenceStore":
        """Load rates and territories from a JSON document.

        Args:
            path: File with ``class_code_rates`` and ``territories`` arrays

        Returns:
            Populated store
        """
        document = ReferenceDataDocument.model_validate_json(
            Path(path).read_text(encoding="utf-8")
        )
        store = cls(document.class_code_rates, document.territories)
        logger.info(
            "Loaded %d class code rates and %d territories from %s",
            store.rate_count,
            store.territory_count,
            path,
        )
        return store
