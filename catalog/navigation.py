"""
Navigation state machine for the recipe finder.

The ViewController is the single entry point for user actions. For each action
it decides what to fetch, routes filter results through the DetailAggregator
where needed, and emits signals to the injected renderer.

Sections and what they load:
- HOME: the unfiltered listing (CatalogClient.browse_all)
- SEARCH: nothing; reveals the search inputs. Search events load results.
- CATEGORIES / AREAS / INGREDIENTS: the reference list; selecting an entry
  drills down (filter endpoint, then promotion to full records)
- RANDOM / RANDOM_BATCH / LATEST: the matching catalog endpoint
- FAVORITES: the local favorites list
- CONTACT: nothing; reveals the contact form

Every transition bumps a generation counter. Load routines capture the
generation they started with and drop their output if a newer transition
happened while they were waiting. In-flight requests are not cancelled.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple, Union

from catalog.connectors.base import CatalogClient
from catalog.details import DetailAggregator
from catalog.errors import NotFoundError, PersistenceError, RemoteFetchError
from catalog.favorites import FavoriteOutcome, FavoritesStore
from catalog.signals import (
    KIND_AREAS,
    KIND_CATEGORIES,
    KIND_INGREDIENTS,
    KIND_RECIPES,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_SUCCESS,
    BaseRenderer,
    FavoriteChanged,
    Notify,
    ShowError,
    ShowLoading,
    ShowNoResults,
    ShowRecipeDetail,
    ShowResults,
    ShowSection,
    Signal,
)
from catalog.utils.debounce import Debouncer

logger = logging.getLogger(__name__)


class Section(str, Enum):
    HOME = "home"
    SEARCH = "search"
    CATEGORIES = "categories"
    AREAS = "areas"
    INGREDIENTS = "ingredients"
    RANDOM = "random"
    RANDOM_BATCH = "random_batch"
    LATEST = "latest"
    FAVORITES = "favorites"
    CONTACT = "contact"


@dataclass
class ViewState:
    """What the user is looking at. Only the ViewController mutates it."""

    current_section: Section = Section.HOME
    last_query: Optional[str] = None


# Section -> (title, subtitle, breadcrumb)
SECTION_HEADERS: Dict[Section, Tuple[str, str, Optional[str]]] = {
    Section.HOME: ("Recipe Finder Pro", "Discover culinary excellence from around the world", None),
    Section.SEARCH: ("Search Recipes", "Find your perfect recipe by name or first letter", "Search"),
    Section.CATEGORIES: ("Recipe Categories", "Browse recipes by category", "Categories"),
    Section.AREAS: ("Cuisine Areas", "Explore recipes from different regions", "Areas"),
    Section.INGREDIENTS: ("Ingredients", "Find recipes by ingredient", "Ingredients"),
    Section.RANDOM: ("Random Recipe", "Discover something new and exciting", "Random"),
    Section.RANDOM_BATCH: ("Random Selection", "A curated selection of random recipes", "Random Selection"),
    Section.LATEST: ("Latest Recipes", "The newest additions to our collection", "Latest"),
    Section.FAVORITES: ("Favorite Recipes", "Your saved recipes", "Favorites"),
    Section.CONTACT: ("Contact Us", "Get in touch with our culinary experts", "Contact"),
}

HOME_ERROR = "Failed to load recipes. Please try again later."
SEARCH_ERROR = "Search failed. Please try again."
ID_SEARCH_ERROR = "Recipe not found. Please check the ID and try again."
RANDOM_ERROR = "Failed to load random recipe. Please try again."
RANDOM_BATCH_ERROR = "Failed to load random selection. Please try again."
LATEST_ERROR = "Failed to load latest recipes. Please try again."
CATEGORIES_ERROR = "Failed to load categories. Please try again later."
AREAS_ERROR = "Failed to load areas. Please try again later."
INGREDIENTS_ERROR = "Failed to load ingredients. Please try again later."
CATEGORY_RECIPES_ERROR = "Failed to load category recipes. Please try again."
AREA_RECIPES_ERROR = "Failed to load area recipes. Please try again."
INGREDIENT_RECIPES_ERROR = "Failed to load ingredient recipes. Please try again."
DETAIL_ERROR = "Failed to load recipe details. Please try again."
FAVORITES_READ_ERROR = "Could not read your favorites."

FAVORITE_MESSAGES: Dict[FavoriteOutcome, Tuple[str, str]] = {
    FavoriteOutcome.ADDED: ("Recipe added to favorites!", LEVEL_SUCCESS),
    FavoriteOutcome.ALREADY_PRESENT: ("Recipe already in favorites!", LEVEL_INFO),
    FavoriteOutcome.REMOVED: ("Recipe removed from favorites!", LEVEL_SUCCESS),
    FavoriteOutcome.NOT_PRESENT: ("Recipe was not in your favorites.", LEVEL_INFO),
}

Loader = Callable[[], Awaitable[Sequence[Any]]]


class ViewController:
    """
    Maps user actions to catalog calls and renderer signals.

    Args:
        client: Catalog client used for every remote lookup
        renderer: Receives all signals; injected so tests can record them
        favorites: Local favorites store
        details: Promotion helper (defaults to a DetailAggregator over `client`)
        debounce_seconds: Delay for search_input() keystroke handling
    """

    def __init__(
        self,
        client: CatalogClient,
        renderer: BaseRenderer,
        favorites: FavoritesStore,
        details: Optional[DetailAggregator] = None,
        debounce_seconds: float = 0.3,
    ) -> None:
        self.client = client
        self.renderer = renderer
        self.favorites = favorites
        self.details = details or DetailAggregator(client)
        self.state = ViewState()
        self._generation = 0
        self._debounced_search = Debouncer(self.search_by_name, wait=debounce_seconds)

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _emit(self, signal: Signal) -> None:
        self.renderer.emit(signal)

    def _begin(self, section: Section, query: Optional[str] = None) -> int:
        """Start a transition: update the state and return its generation."""
        self._generation += 1
        self.state.current_section = section
        self.state.last_query = query
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _emit_header(self, section: Section, title: Optional[str] = None, subtitle: Optional[str] = None) -> None:
        default_title, default_subtitle, breadcrumb = SECTION_HEADERS[section]
        self._emit(ShowSection(
            section=section.value,
            title=title or default_title,
            subtitle=subtitle or default_subtitle,
            breadcrumb=breadcrumb,
            show_search=section is Section.SEARCH,
            show_contact_form=section is Section.CONTACT,
        ))

    def _present(self, items: Sequence[Any], kind: str) -> None:
        if not items:
            self._emit(ShowNoResults())
        else:
            self._emit(ShowResults(items=tuple(items), kind=kind))

    async def _run_load(self, generation: int, loader: Loader, error_message: str, kind: str = KIND_RECIPES) -> None:
        """
        Shared body of every load routine: loading signal, fetch, then results.

        Output is dropped when a newer transition started while we were waiting.
        """
        self._emit(ShowLoading())
        try:
            items = await loader()
        except RemoteFetchError as e:
            if self._is_current(generation):
                logger.warning("Load failed for %s: %s", self.state.current_section.value, e)
                self._emit(ShowError(error_message))
            else:
                logger.debug("Discarding stale error from generation %d: %s", generation, e)
            return

        if not self._is_current(generation):
            logger.debug("Discarding stale results from generation %d (current %d)", generation, self._generation)
            return
        self._present(items, kind)

    # ------------------------------------------------------------------
    # Section navigation
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Show the home listing, as on first load."""
        await self.navigate(Section.HOME)

    async def navigate(self, section: Union[Section, str]) -> None:
        """
        Switch to a section and run its load routine.

        Unknown section names fall back to HOME.
        """
        try:
            target = Section(section)
        except ValueError:
            logger.warning("Unknown section %r, showing home instead", section)
            target = Section.HOME

        generation = self._begin(target)
        logger.info("Navigating to %s (generation %d)", target.value, generation)
        self._emit_header(target)

        if target is Section.HOME:
            await self._run_load(generation, self.client.browse_all, HOME_ERROR)
        elif target is Section.SEARCH or target is Section.CONTACT:
            return
        elif target is Section.CATEGORIES:
            await self._run_load(generation, self.client.list_categories, CATEGORIES_ERROR, KIND_CATEGORIES)
        elif target is Section.AREAS:
            await self._run_load(generation, self.client.list_areas, AREAS_ERROR, KIND_AREAS)
        elif target is Section.INGREDIENTS:
            await self._run_load(generation, self.client.list_ingredients, INGREDIENTS_ERROR, KIND_INGREDIENTS)
        elif target is Section.RANDOM:
            await self._load_random(generation)
        elif target is Section.RANDOM_BATCH:
            await self._run_load(generation, self.client.get_random_batch, RANDOM_BATCH_ERROR)
        elif target is Section.LATEST:
            await self._run_load(generation, self.client.get_latest, LATEST_ERROR)
        elif target is Section.FAVORITES:
            await self._load_favorites(generation)

    async def _load_random(self, generation: int) -> None:
        self._emit(ShowLoading())
        try:
            recipe = await self.client.get_random()
        except RemoteFetchError as e:
            logger.warning("Random recipe failed: %s", e)
            recipe = None
        if not self._is_current(generation):
            return
        if recipe is None:
            self._emit(ShowError(RANDOM_ERROR))
        else:
            self._emit(ShowResults(items=(recipe,), kind=KIND_RECIPES))

    async def _load_favorites(self, generation: int) -> None:
        self._emit(ShowLoading())
        try:
            favorites = await self.favorites.list()
        except PersistenceError as e:
            logger.warning("Could not read favorites: %s", e)
            if self._is_current(generation):
                self._emit(Notify(FAVORITES_READ_ERROR, LEVEL_ERROR))
                self._emit(ShowNoResults())
            return
        if self._is_current(generation):
            self._present(favorites, KIND_RECIPES)

    # ------------------------------------------------------------------
    # Search events (stay in SEARCH)
    # ------------------------------------------------------------------

    def search_input(self, query: str):
        """
        Debounced keystroke handler for the name search box.

        Returns the scheduled asyncio.Task. Needs a running event loop.
        """
        return self._debounced_search(query)

    async def search_by_name(self, query: str) -> None:
        """
        Run a name search. A cleared box (blank query) shows the home listing again.
        """
        generation = self._begin(Section.SEARCH, query)
        if not query or not query.strip():
            await self._run_load(generation, self.client.browse_all, HOME_ERROR)
            return
        await self._run_load(generation, lambda: self.client.search_by_name(query), SEARCH_ERROR)

    async def search_by_letter(self, letter: str) -> None:
        """Run a first-letter search. Anything but one character shows the home listing."""
        generation = self._begin(Section.SEARCH, letter)
        if not letter or len(letter) != 1:
            await self._run_load(generation, self.client.browse_all, HOME_ERROR)
            return
        await self._run_load(generation, lambda: self.client.search_by_first_letter(letter), SEARCH_ERROR)

    async def search_by_id(self, recipe_id: str) -> None:
        """Look up one recipe by id. A blank id shows the home listing."""
        generation = self._begin(Section.SEARCH, recipe_id)
        if not recipe_id or not recipe_id.strip():
            await self._run_load(generation, self.client.browse_all, HOME_ERROR)
            return

        async def load_one():
            recipe = await self.client.get_by_id(recipe_id)
            return [recipe] if recipe else []

        await self._run_load(generation, load_one, ID_SEARCH_ERROR)

    # ------------------------------------------------------------------
    # Drill-down (stay in the parent section)
    # ------------------------------------------------------------------

    async def select_category(self, name: str) -> None:
        await self._drill_down(
            Section.CATEGORIES,
            name,
            self.client.find_by_category,
            f"{name} Recipes",
            f"Discover delicious {name.lower()} recipes",
            CATEGORY_RECIPES_ERROR,
        )

    async def select_area(self, name: str) -> None:
        await self._drill_down(
            Section.AREAS,
            name,
            self.client.find_by_area,
            f"{name} Cuisine",
            f"Explore authentic {name.lower()} recipes",
            AREA_RECIPES_ERROR,
        )

    async def select_ingredient(self, name: str) -> None:
        await self._drill_down(
            Section.INGREDIENTS,
            name,
            self.client.find_by_ingredient,
            f"Recipes with {name}",
            f"Discover recipes containing {name.lower()}",
            INGREDIENT_RECIPES_ERROR,
        )

    async def _drill_down(
        self,
        parent: Section,
        name: str,
        find: Callable[[str], Awaitable[Sequence[Any]]],
        title: str,
        subtitle: str,
        error_message: str,
    ) -> None:
        """Filter by `name`, then always promote the filter results to full records."""
        generation = self._begin(parent, name)
        logger.info("Drilling into %s %r (generation %d)", parent.value, name, generation)
        self._emit_header(parent, title=title, subtitle=subtitle)

        async def load_detailed():
            results = await find(name)
            if not results or not self._is_current(generation):
                return []
            return await self.details.promote(results)

        await self._run_load(generation, load_detailed, error_message)

    # ------------------------------------------------------------------
    # Recipe detail and favorites
    # ------------------------------------------------------------------

    async def show_recipe(self, recipe_id: str) -> None:
        """Open the detail view for one recipe."""
        try:
            recipe = await self.client.get_by_id(recipe_id)
            if recipe is None:
                raise NotFoundError(recipe_id)
        except (RemoteFetchError, NotFoundError) as e:
            logger.warning("Could not show recipe %s: %s", recipe_id, e)
            self._emit(ShowError(DETAIL_ERROR))
            return
        self._emit(ShowRecipeDetail(record=recipe))

    async def is_favorite(self, recipe_id: str) -> bool:
        """Favorite badge state; unreadable storage counts as not favorited."""
        try:
            return await self.favorites.contains(recipe_id)
        except PersistenceError as e:
            logger.warning("Could not read favorites: %s", e)
            return False

    async def toggle_favorite(self, recipe_id: str) -> Optional[FavoriteOutcome]:
        """
        Add or remove a recipe from favorites and notify the user.

        Returns:
            The outcome, or None if the toggle failed (a Notify error was emitted)
        """
        try:
            outcome = await self.favorites.toggle(recipe_id, self.client.get_by_id)
        except NotFoundError as e:
            logger.warning("Cannot favorite %s: %s", recipe_id, e)
            self._emit(Notify("Recipe could not be found.", LEVEL_ERROR))
            return None
        except RemoteFetchError as e:
            logger.warning("Cannot fetch recipe %s for favorites: %s", recipe_id, e)
            self._emit(Notify("Failed to update favorite", LEVEL_ERROR))
            return None
        except PersistenceError as e:
            logger.error("Favorites write failed for %s: %s", recipe_id, e)
            self._emit(Notify("Failed to save favorites", LEVEL_ERROR))
            return None

        message, level = FAVORITE_MESSAGES[outcome]
        self._emit(Notify(message, level))
        is_favorite = outcome in (FavoriteOutcome.ADDED, FavoriteOutcome.ALREADY_PRESENT)
        self._emit(FavoriteChanged(recipe_id=recipe_id, is_favorite=is_favorite))

        if outcome is FavoriteOutcome.REMOVED and self.state.current_section is Section.FAVORITES:
            await self._load_favorites(self._begin(Section.FAVORITES))
        return outcome
