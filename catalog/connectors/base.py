"""
Base client abstract class for recipe catalog integrations.

This module defines the interface every catalog client implements. The
DetailAggregator and ViewController depend only on this interface, so tests and
alternative catalogs can plug in without touching navigation code.

All clients must:
- Be fully asynchronous (every operation is a coroutine)
- Normalize raw payloads into catalog.models types
- Raise RemoteFetchError for transport/status failures, except the two
  degraded-mode operations (get_random_batch, get_latest) which never raise it
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from catalog.models import Area, Category, FilterResultRecord, Ingredient, RecipeRecord


class CatalogClient(ABC):
    """
    Abstract base class for recipe catalog clients.

    Attributes:
        catalog: String identifier for the catalog (e.g., "mealdb")
    """
    catalog: str

    @abstractmethod
    async def search_by_name(self, query: str) -> List[RecipeRecord]:
        """
        Search recipes by name.

        Returns an empty list without contacting the network when the query is
        blank after trimming. No matches is an empty list, not an error.
        """

    @abstractmethod
    async def browse_all(self) -> List[RecipeRecord]:
        """Fetch the unfiltered listing used by the home view."""

    @abstractmethod
    async def search_by_first_letter(self, letter: str) -> List[RecipeRecord]:
        """Search recipes by first letter; anything but one character yields []."""

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        pass

    @abstractmethod
    async def list_areas(self) -> List[Area]:
        pass

    @abstractmethod
    async def list_ingredients(self) -> List[Ingredient]:
        pass

    @abstractmethod
    async def find_by_ingredient(self, name: str) -> List[FilterResultRecord]:
        pass

    @abstractmethod
    async def find_by_category(self, name: str) -> List[FilterResultRecord]:
        pass

    @abstractmethod
    async def find_by_area(self, name: str) -> List[FilterResultRecord]:
        pass

    @abstractmethod
    async def get_random(self) -> Optional[RecipeRecord]:
        """Return one random recipe, or None if the catalog returned nothing."""

    @abstractmethod
    async def get_random_batch(self) -> List[RecipeRecord]:
        """
        Return a batch of random recipes.

        Must not raise RemoteFetchError: when the batch endpoint is unavailable,
        falls back to get_random() wrapped in a list (or [] if that is absent too).
        """

    @abstractmethod
    async def get_latest(self) -> List[RecipeRecord]:
        """Return the latest recipes, or [] when the endpoint is unavailable."""

    @abstractmethod
    async def get_by_id(self, recipe_id: str) -> Optional[RecipeRecord]:
        """Return the recipe with this id, or None if it doesn't resolve."""
