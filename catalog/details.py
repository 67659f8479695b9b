"""
Detail aggregation for filter results.

The filter endpoints (by category, area, ingredient) only return id, name and
thumbnail. Before those recipes can be listed with category/area badges or
opened, each one is promoted to a full RecipeRecord with a lookup by id.

Promotion flow: filter.php -> FilterResultRecord[] -> lookup.php per id -> RecipeRecord[]

Lookups run one at a time in input order, so the output order always matches
the input order. Ids that no longer resolve are dropped; the first failed lookup
aborts the whole promotion (partial lists are never reported as success).
"""

import logging
from typing import List, Protocol, Sequence

from catalog.connectors.base import CatalogClient
from catalog.models import RecipeRecord

logger = logging.getLogger(__name__)


class HasRecipeId(Protocol):
    """Anything exposing a recipe id (FilterResultRecord, RecipeRecord, ...)."""

    id: str


class DetailAggregator:
    """Promotes lightweight records to full RecipeRecords via sequential lookups."""

    def __init__(self, client: CatalogClient) -> None:
        self.client = client

    async def promote(self, records: Sequence[HasRecipeId]) -> List[RecipeRecord]:
        """
        Look up the full record for each entry, preserving input order.

        Args:
            records: Records exposing an `id`

        Returns:
            Detailed records; may be shorter than the input when ids don't resolve

        Raises:
            RemoteFetchError: If any lookup fails; the remaining lookups are skipped
        """
        detailed: List[RecipeRecord] = []
        dropped = 0

        for record in records:
            recipe_id = getattr(record, "id", None)
            if not recipe_id:
                dropped += 1
                continue

            recipe = await self.client.get_by_id(recipe_id)
            if recipe is None:
                logger.debug("Recipe %s no longer resolves; dropping it", recipe_id)
                dropped += 1
                continue
            detailed.append(recipe)

        logger.info("Promoted %d of %d records (%d dropped)", len(detailed), len(records), dropped)
        return detailed
