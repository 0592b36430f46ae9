"""Class code rate lookup.

Rates are read through ``ClassCodeRateSource`` so the engine can run
against the in-memory store in tests and any backend in production. A
missing or unreachable rate never fails a rating run: the line is rated at
a zero base rate and the caller gets a warning.
"""

import asyncio
import logging
from datetime import date
from typing import Protocol, runtime_checkable

from beartype import beartype

from ...models.rating import RateLookup
from ...models.reference import ClassCodeRate

logger = logging.getLogger(__name__)

DEFAULT_HAZARD_GROUP = "A"
DEFAULT_INDUSTRY_GROUP = "Unknown"


@runtime_checkable
class ClassCodeRateSource(Protocol):
    """Provides class code rates by (state, class code, effective date)."""

    async def get_class_code_rate(
        self, state_code: str, class_code: str, effective_date: date
    ) -> ClassCodeRate | None: ...


@beartype
def default_class_code_rate(
    state_code: str, class_code: str, effective_date: date
) -> ClassCodeRate:
    """Zero-rate record used when no rate is on file."""
    return ClassCodeRate(
        state_code=state_code,
        class_code=class_code,
        effective_date=effective_date,
        base_rate=0.0,
        hazard_group=DEFAULT_HAZARD_GROUP,
        industry_group=DEFAULT_INDUSTRY_GROUP,
    )


@beartype
class RateTable:
    """Resolves base rate, hazard group and industry group for a class code."""

    def __init__(
        self, source: ClassCodeRateSource, timeout_seconds: float | None = None
    ) -> None:
        """Initialize rate table.

        Args:
            source: Reference data store holding class code rates
            timeout_seconds: Deadline for a single lookup; None waits forever
        """
        self._source = source
        self._timeout = timeout_seconds

    @beartype
    async def lookup(
        self, state_code: str, class_code: str, effective_date: date
    ) -> RateLookup:
        """Look up the active rate for a class code.

        Args:
            state_code: Two-letter state code
            class_code: Class code
            effective_date: Rating period

        Returns:
            RateLookup whose ``warning`` is set when the rate was defaulted
        """
        state_code = state_code.strip().upper()
        key = f"{state_code}-{class_code}"

        try:
            rate = await asyncio.wait_for(
                self._source.get_class_code_rate(
                    state_code, class_code, effective_date
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Rate lookup for %s timed out after %ss", key, self._timeout
            )
            return RateLookup(
                rate=default_class_code_rate(state_code, class_code, effective_date),
                warning=f"Rate lookup for {key} timed out; base rate defaulted to 0",
            )
        except Exception as e:
            logger.error("Error getting class code rate for %s: %s", key, e)
            return RateLookup(
                rate=default_class_code_rate(state_code, class_code, effective_date),
                warning=f"Rate lookup for {key} failed ({e}); base rate defaulted to 0",
            )

        if rate is None:
            logger.warning(
                "Base rate not found for %s effective %s",
                key,
                effective_date.isoformat(),
            )
            return RateLookup(
                rate=default_class_code_rate(state_code, class_code, effective_date),
                warning=(
                    f"No rate on file for class {class_code} in {state_code} "
                    f"effective {effective_date.isoformat()}; base rate defaulted to 0"
                ),
            )

        return RateLookup(rate=rate)
