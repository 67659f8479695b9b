"""
TheMealDB connector.

This connector talks to TheMealDB's public JSON API (v1, test key "1") and
normalizes its payloads into the catalog models.

The connector:
- Builds canonical request URLs from fixed endpoint paths and percent-encoded params
- Consults the ResponseCache before every request and stores every success
- Runs the blocking requests.Session.get in a worker thread so callers can await it
- Maps `meals` / `categories` arrays into RecipeRecord, FilterResultRecord, etc.
- Degrades silently for the two premium endpoints (randomselection, latest)

The base URL, cache TTL and request timeout come from catalog.config
(MEALDB_BASE_URL, CATALOG_CACHE_TTL_SECONDS, CATALOG_REQUEST_TIMEOUT_SECONDS).
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from catalog.config import CatalogConfig
from catalog.errors import RemoteFetchError
from catalog.models import Area, Category, FilterResultRecord, Ingredient, RecipeRecord
from catalog.utils.cache import ResponseCache, make_request_cache_key

from .base import CatalogClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Endpoint paths relative to the API base URL
SEARCH_ENDPOINT = "search.php"
CATEGORIES_ENDPOINT = "categories.php"
LIST_ENDPOINT = "list.php"
FILTER_ENDPOINT = "filter.php"
LOOKUP_ENDPOINT = "lookup.php"
RANDOM_ENDPOINT = "random.php"
RANDOM_SELECTION_ENDPOINT = "randomselection.php"
LATEST_ENDPOINT = "latest.php"


class MealDBConnector(CatalogClient):
    """
    Catalog client for TheMealDB.

    Owns its ResponseCache: cached payloads are returned verbatim without
    re-validating against the network. Failed requests are never cached and
    never retried.
    """
    catalog = "mealdb"

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[ResponseCache] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the connector.

        Args:
            base_url: API base URL (optional, reads MEALDB_BASE_URL or uses the public v1 URL)
            cache: Response cache (optional, a new one with the configured TTL is created)
            session: requests session (optional, a new one is created)
            timeout: Request timeout in seconds (optional, reads CATALOG_REQUEST_TIMEOUT_SECONDS;
                     None means no timeout beyond the transport's own)
        """
        self.base_url = (base_url or CatalogConfig.get_base_url()).rstrip("/")
        self.cache = cache if cache is not None else ResponseCache(default_ttl=CatalogConfig.get_cache_ttl_seconds())
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else CatalogConfig.get_request_timeout_seconds()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    async def _fetch_json(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        Fetch a JSON payload, going through the cache.

        Args:
            endpoint: Endpoint path (e.g., "filter.php")
            params: Query parameters; values are percent-encoded

        Returns:
            Decoded JSON object

        Raises:
            RemoteFetchError: On transport errors, non-2xx status, or a non-object body
        """
        key = make_request_cache_key(endpoint, params)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        url = f"{self.base_url}/{key}"
        logger.info("Fetching %s", url)
        try:
            response = await asyncio.to_thread(self.session.get, url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise RemoteFetchError(endpoint, e) from e
        except ValueError as e:
            raise RemoteFetchError(endpoint, e) from e

        if not isinstance(data, dict):
            raise RemoteFetchError(endpoint, ValueError(f"Unexpected payload type {type(data).__name__}"))

        self.cache.set(key, data)
        return data

    @staticmethod
    def _normalize(data: Dict[str, Any], field: str, parse: Callable[[Dict[str, Any]], T], endpoint: str) -> List[T]:
        """
        Map the array under `field` into models, skipping entries that can't be parsed.

        A missing or null field means "no results" and yields an empty list.
        """
        raw_items = data.get(field)
        if not isinstance(raw_items, list):
            return []

        normalized: List[T] = []
        parse_errors = 0
        for item in raw_items:
            if not isinstance(item, dict):
                parse_errors += 1
                continue
            try:
                normalized.append(parse(item))
            except ValueError as e:
                logger.warning("%s: skipping unparseable item: %s", endpoint, e)
                parse_errors += 1

        if parse_errors:
            logger.warning("%s: %d of %d items could not be parsed", endpoint, parse_errors, len(raw_items))
        return normalized

    async def _recipes(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> List[RecipeRecord]:
        data = await self._fetch_json(endpoint, params)
        return self._normalize(data, "meals", RecipeRecord.from_api, endpoint)

    async def _filter(self, params: Dict[str, str]) -> List[FilterResultRecord]:
        data = await self._fetch_json(FILTER_ENDPOINT, params)
        return self._normalize(data, "meals", FilterResultRecord.from_api, FILTER_ENDPOINT)

    async def search_by_name(self, query: str) -> List[RecipeRecord]:
        """
        Search recipes by name.

        Args:
            query: Search text; blank input returns [] without a request

        Returns:
            List of RecipeRecord (empty when nothing matches)
        """
        if not query or not query.strip():
            return []
        return await self._recipes(SEARCH_ENDPOINT, {"s": query})

    async def browse_all(self) -> List[RecipeRecord]:
        """
        Fetch the unfiltered home listing.

        Issues the name search with an empty value, which the API answers with a
        default set of recipes. Kept separate from search_by_name("") because a
        cleared search box must not hit the network.
        """
        return await self._recipes(SEARCH_ENDPOINT, {"s": ""})

    async def search_by_first_letter(self, letter: str) -> List[RecipeRecord]:
        if not letter or len(letter) != 1:
            return []
        return await self._recipes(SEARCH_ENDPOINT, {"f": letter.upper()})

    async def list_categories(self) -> List[Category]:
        data = await self._fetch_json(CATEGORIES_ENDPOINT)
        return self._normalize(data, "categories", Category.from_api, CATEGORIES_ENDPOINT)

    async def list_areas(self) -> List[Area]:
        data = await self._fetch_json(LIST_ENDPOINT, {"a": "list"})
        return self._normalize(data, "meals", Area.from_api, LIST_ENDPOINT)

    async def list_ingredients(self) -> List[Ingredient]:
        data = await self._fetch_json(LIST_ENDPOINT, {"i": "list"})
        return self._normalize(data, "meals", Ingredient.from_api, LIST_ENDPOINT)

    async def find_by_ingredient(self, name: str) -> List[FilterResultRecord]:
        return await self._filter({"i": name})

    async def find_by_category(self, name: str) -> List[FilterResultRecord]:
        return await self._filter({"c": name})

    async def find_by_area(self, name: str) -> List[FilterResultRecord]:
        return await self._filter({"a": name})

    async def get_random(self) -> Optional[RecipeRecord]:
        recipes = await self._recipes(RANDOM_ENDPOINT)
        return recipes[0] if recipes else None

    async def get_random_batch(self) -> List[RecipeRecord]:
        """
        Get a random selection of recipes.

        randomselection.php is a premium endpoint. When it fails, a single
        random recipe is substituted; callers can't tell the difference.

        Returns:
            List of RecipeRecord; never raises RemoteFetchError
        """
        try:
            return await self._recipes(RANDOM_SELECTION_ENDPOINT)
        except RemoteFetchError as e:
            logger.warning("Random selection not available, falling back to single random recipe: %s", e)

        try:
            recipe = await self.get_random()
        except RemoteFetchError as e:
            logger.warning("Random recipe fallback failed as well: %s", e)
            return []
        return [recipe] if recipe else []

    async def get_latest(self) -> List[RecipeRecord]:
        """
        Get the latest recipes.

        latest.php is a premium endpoint; when it fails this returns [], which
        callers treat the same as "no latest recipes".
        """
        try:
            return await self._recipes(LATEST_ENDPOINT)
        except RemoteFetchError as e:
            logger.warning("Latest meals not available: %s", e)
            return []

    async def get_by_id(self, recipe_id: str) -> Optional[RecipeRecord]:
        if not recipe_id or not recipe_id.strip():
            return None
        recipes = await self._recipes(LOOKUP_ENDPOINT, {"i": recipe_id.strip()})
        return recipes[0] if recipes else None
