# PolicyCore - Policy Decision Management System
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.
"""Territory management for geographic rating factors.

This module maps a business location to a rated territory. Matching order,
first hit wins:

1. City name contained in a territory's description (case-insensitive)
2. ZIP code inside a territory's ZIP ranges; among several hits the
   highest multiplier is taken
3. A territory whose code ends in ``-RUR`` or ``-BASE``
4. The first territory on file, or a synthetic ``{state}-BASE`` territory
   at 1.0 when the state has none

Every address therefore resolves to some multiplier.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import date
from typing import Protocol, runtime_checkable

from beartype import beartype

from ...models.business import Address
from ...models.rating import TerritoryResolution
from ...models.reference import Territory

logger = logging.getLogger(__name__)

BASE_TERRITORY_DESCRIPTION = "Base Rate Territory"


@runtime_checkable
class TerritorySource(Protocol):
    """Provides the territories on file for a state and rating period."""

    async def get_territories(
        self, state_code: str, effective_date: date
    ) -> Sequence[Territory]: ...


@beartype
def synthetic_base_territory(
    state_code: str, description: str = BASE_TERRITORY_DESCRIPTION
) -> Territory:
    """Unity-multiplier territory for states with nothing on file."""
    return Territory(
        territory_code=f"{state_code}-BASE",
        state_code=state_code,
        rate_multiplier=1.0,
        description=description,
    )


@beartype
def normalize_zip(zip_code: str) -> int | None:
    """Return the five-digit ZIP as an int, or None if it is not numeric.

    ZIP+4 input (``90210-1234``) is reduced to its base.
    """
    zip_base = zip_code.strip()[:5]
    if len(zip_base) != 5 or not zip_base.isdigit():
        return None
    return int(zip_base)


@beartype
def find_best_territory_match(
    address: Address, territories: Sequence[Territory]
) -> tuple[Territory, str]:
    """Apply the matching order to a non-empty list of territories.

    Returns:
        The chosen territory and the rule that matched it
    """
    city = address.city.strip().lower()
    if city:
        for territory in territories:
            if city in territory.description.lower():
                return territory, "city"

    zip_number = normalize_zip(address.zip_code)
    if zip_number is not None:
        zip_matches = [t for t in territories if t.covers_zip(zip_number)]
        if zip_matches:
            best = zip_matches[0]
            for territory in zip_matches[1:]:
                if territory.rate_multiplier > best.rate_multiplier:
                    best = territory
            return best, "zip"

    for territory in territories:
        if territory.is_base_territory:
            return territory, "fallback"

    return territories[0], "first"


@beartype
class TerritoryResolver:
    """Resolves an address to a territory and its rate multiplier."""

    def __init__(
        self, source: TerritorySource, timeout_seconds: float | None = None
    ) -> None:
        """Initialize territory resolver.

        Args:
            source: Reference data store holding territories
            timeout_seconds: Deadline for a single lookup; None waits forever
        """
        self._source = source
        self._timeout = timeout_seconds

    @beartype
    async def get_territories(
        self, state_code: str, effective_date: date
    ) -> tuple[list[Territory], str | None]:
        """Fetch territories, converting source failures into a warning."""
        try:
            territories = await asyncio.wait_for(
                self._source.get_territories(state_code, effective_date),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Territory lookup for %s timed out after %ss", state_code, self._timeout
            )
            return [], f"Territory lookup for {state_code} timed out"
        except Exception as e:
            logger.error("Territory rating error for %s: %s", state_code, e)
            return [], f"Territory lookup for {state_code} failed ({e})"
        return list(territories), None

    @beartype
    async def resolve(
        self, address: Address, state_code: str, effective_date: date
    ) -> TerritoryResolution:
        """Resolve the territory for an address.

        Args:
            address: Business location in the rated state
            state_code: Two-letter state code
            effective_date: Rating period

        Returns:
            TerritoryResolution; never fails
        """
        state_code = state_code.strip().upper()
        territories, lookup_warning = await self.get_territories(
            state_code, effective_date
        )

        if lookup_warning is not None:
            return TerritoryResolution(
                territory=synthetic_base_territory(
                    state_code, f"{BASE_TERRITORY_DESCRIPTION} (Error Fallback)"
                ),
                match="synthetic",
                warning=f"{lookup_warning}; territory multiplier defaulted to 1.0",
            )

        if not territories:
            logger.info("No territories on file for %s; using base territory", state_code)
            return TerritoryResolution(
                territory=synthetic_base_territory(state_code),
                match="synthetic",
                warning=(
                    f"No territories on file for {state_code}; "
                    "territory multiplier defaulted to 1.0"
                ),
            )

        territory, match = find_best_territory_match(address, territories)
        logger.debug(
            "Resolved %s %s to territory %s by %s match",
            address.city,
            address.zip_code,
            territory.territory_code,
            match,
        )
        return TerritoryResolution(territory=territory, match=match)
