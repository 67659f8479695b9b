"""
Tests for the ViewController navigation state machine.

A FakeCatalogClient serves canned data from dicts and records every call, and a
RecordingRenderer captures the emitted signals. Gates (asyncio.Event) let a
test hold a request open to interleave two transitions.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from catalog.connectors.base import CatalogClient
from catalog.errors import PersistenceError, RemoteFetchError
from catalog.favorites import FavoriteOutcome, FavoritesStore, InMemoryStore, KeyValueStore
from catalog.models import Area, Category, FilterResultRecord, Ingredient, RecipeRecord
from catalog.navigation import (
    CATEGORIES_ERROR,
    CATEGORY_RECIPES_ERROR,
    DETAIL_ERROR,
    HOME_ERROR,
    RANDOM_ERROR,
    SEARCH_ERROR,
    Section,
    ViewController,
)
from catalog.signals import (
    KIND_AREAS,
    KIND_CATEGORIES,
    KIND_INGREDIENTS,
    KIND_RECIPES,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_SUCCESS,
    FavoriteChanged,
    Notify,
    RecordingRenderer,
    ShowError,
    ShowLoading,
    ShowNoResults,
    ShowRecipeDetail,
    ShowResults,
    ShowSection,
)


def _recipe(recipe_id, name=None, category=None):
    return RecipeRecord(id=recipe_id, name=name or f"Recipe {recipe_id}", category=category)


class FakeCatalogClient(CatalogClient):
    """In-memory catalog. Any method name listed in `failing` raises RemoteFetchError."""

    catalog = "fake"

    def __init__(self) -> None:
        self.home: List[RecipeRecord] = [_recipe("h1", "Home One")]
        self.by_name: Dict[str, List[RecipeRecord]] = {}
        self.by_letter: Dict[str, List[RecipeRecord]] = {}
        self.categories: List[Category] = [Category(name="Seafood"), Category(name="Beef")]
        self.areas: List[Area] = [Area(name="Italian")]
        self.ingredients: List[Ingredient] = [Ingredient(name="Salmon")]
        self.filters: Dict[str, List[FilterResultRecord]] = {}
        self.recipes: Dict[str, RecipeRecord] = {}
        self.random: Optional[RecipeRecord] = None
        self.failing: set = set()
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[tuple] = []

    async def _call(self, method: str, *args):
        self.calls.append((method,) + args)
        gate = self.gates.get(args[0] if args else method)
        if gate is not None:
            await gate.wait()
        if method in self.failing:
            raise RemoteFetchError(f"{method}.php", ConnectionError("offline"))

    def called(self, method: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == method]

    async def search_by_name(self, query):
        await self._call("search_by_name", query)
        return self.by_name.get(query, [])

    async def browse_all(self):
        await self._call("browse_all")
        return list(self.home)

    async def search_by_first_letter(self, letter):
        await self._call("search_by_first_letter", letter)
        return self.by_letter.get(letter.upper(), [])

    async def list_categories(self):
        await self._call("list_categories")
        return list(self.categories)

    async def list_areas(self):
        await self._call("list_areas")
        return list(self.areas)

    async def list_ingredients(self):
        await self._call("list_ingredients")
        return list(self.ingredients)

    async def find_by_ingredient(self, name):
        await self._call("find_by_ingredient", name)
        return self.filters.get(name, [])

    async def find_by_category(self, name):
        await self._call("find_by_category", name)
        return self.filters.get(name, [])

    async def find_by_area(self, name):
        await self._call("find_by_area", name)
        return self.filters.get(name, [])

    async def get_random(self):
        await self._call("get_random")
        return self.random

    async def get_random_batch(self):
        await self._call("get_random_batch")
        return [self.random] if self.random else []

    async def get_latest(self):
        await self._call("get_latest")
        return []

    async def get_by_id(self, recipe_id):
        await self._call("get_by_id", recipe_id)
        return self.recipes.get(recipe_id)


class BrokenStore(KeyValueStore):
    def get_item(self, key):
        raise PersistenceError("unreadable")

    def set_item(self, key, value):
        raise PersistenceError("unwritable")


@pytest.fixture
def client():
    return FakeCatalogClient()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def favorites():
    return FavoritesStore(InMemoryStore(), key="recipeFavorites")


@pytest.fixture
def controller(client, renderer, favorites):
    return ViewController(client, renderer, favorites, debounce_seconds=0.01)


class TestSectionNavigation:
    """Tests for navigate() and each section's load routine."""

    @pytest.mark.asyncio
    async def test_start_shows_home_listing(self, controller, renderer):
        await controller.start()

        assert controller.state.current_section is Section.HOME
        header, loading, results = renderer.signals
        assert isinstance(header, ShowSection) and header.section == "home"
        assert isinstance(loading, ShowLoading)
        assert [r.name for r in results.items] == ["Home One"]

    @pytest.mark.asyncio
    async def test_categories_then_drill_down(self, controller, client, renderer):
        """Categories list, then 'Seafood' promotes filter results A and B to full records."""
        client.filters["Seafood"] = [FilterResultRecord(id="A", name="a"), FilterResultRecord(id="B", name="b")]
        client.recipes = {
            "A": _recipe("A", "Fish Pie", category="Seafood"),
            "B": _recipe("B", "Salmon Bake", category="Seafood"),
        }

        await controller.navigate(Section.CATEGORIES)
        listing = renderer.of_type(ShowResults)[-1]
        assert listing.kind == KIND_CATEGORIES
        assert [c.name for c in listing.items] == ["Seafood", "Beef"]

        renderer.clear()
        await controller.select_category("Seafood")

        header = renderer.of_type(ShowSection)[0]
        assert header.title == "Seafood Recipes"
        assert header.breadcrumb == "Categories"
        results = renderer.last()
        assert isinstance(results, ShowResults)
        assert results.kind == KIND_RECIPES
        assert [(r.id, r.category) for r in results.items] == [("A", "Seafood"), ("B", "Seafood")]
        assert [call[1] for call in client.called("get_by_id")] == ["A", "B"]
        assert controller.state.current_section is Section.CATEGORIES
        assert controller.state.last_query == "Seafood"

    @pytest.mark.asyncio
    async def test_drill_down_without_results_skips_promotion(self, controller, client, renderer):
        await controller.select_area("Nowhere")
        assert isinstance(renderer.last(), ShowNoResults)
        assert client.called("get_by_id") == []

    @pytest.mark.asyncio
    async def test_load_failure_shows_section_error(self, controller, client, renderer):
        client.failing.add("list_categories")
        await controller.navigate("categories")
        assert renderer.last() == ShowError(CATEGORIES_ERROR)

    @pytest.mark.asyncio
    async def test_unknown_section_falls_back_to_home(self, controller, client):
        await controller.navigate("nonsense")
        assert controller.state.current_section is Section.HOME
        assert client.called("browse_all")

    @pytest.mark.asyncio
    async def test_search_and_contact_load_nothing(self, controller, client, renderer):
        await controller.navigate(Section.SEARCH)
        assert renderer.of_type(ShowSection)[-1].show_search is True
        await controller.navigate(Section.CONTACT)
        assert renderer.of_type(ShowSection)[-1].show_contact_form is True
        assert client.calls == []
        assert renderer.of_type(ShowLoading) == []

    @pytest.mark.asyncio
    async def test_random_without_recipe_shows_error(self, controller, renderer):
        await controller.navigate(Section.RANDOM)
        assert renderer.last() == ShowError(RANDOM_ERROR)

    @pytest.mark.asyncio
    async def test_random_shows_single_recipe(self, controller, client, renderer):
        client.random = _recipe("r1", "Surprise")
        await controller.navigate(Section.RANDOM)
        assert renderer.last() == ShowResults(items=(client.random,), kind=KIND_RECIPES)

    @pytest.mark.asyncio
    async def test_empty_latest_shows_no_results(self, controller, renderer):
        await controller.navigate(Section.LATEST)
        assert isinstance(renderer.last(), ShowNoResults)

    @pytest.mark.asyncio
    async def test_favorites_section_lists_stored_recipes(self, controller, favorites, client, renderer):
        await favorites.add(_recipe("f1", "Saved"))
        await controller.navigate(Section.FAVORITES)
        assert [r.name for r in renderer.last().items] == ["Saved"]
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_unreadable_favorites_notify_and_show_nothing(self, client, renderer):
        controller = ViewController(client, renderer, FavoritesStore(BrokenStore(), key="k"))
        await controller.navigate(Section.FAVORITES)
        notify, empty = renderer.signals[-2:]
        assert isinstance(notify, Notify) and notify.level == LEVEL_ERROR
        assert isinstance(empty, ShowNoResults)


class TestListingsAndDrillDown:
    """Tests for the remaining section listings and drill-down paths."""

    @pytest.mark.asyncio
    async def test_random_batch_shows_results(self, controller, client, renderer):
        client.random = _recipe("r1", "Surprise")
        await controller.navigate(Section.RANDOM_BATCH)
        assert renderer.last() == ShowResults(items=(client.random,), kind=KIND_RECIPES)
        assert client.called("get_random_batch")

    @pytest.mark.asyncio
    async def test_areas_and_ingredients_listings(self, controller, renderer):
        await controller.navigate(Section.AREAS)
        areas = renderer.last()
        assert areas.kind == KIND_AREAS
        assert [a.name for a in areas.items] == ["Italian"]

        await controller.navigate(Section.INGREDIENTS)
        ingredients = renderer.last()
        assert ingredients.kind == KIND_INGREDIENTS
        assert [i.name for i in ingredients.items] == ["Salmon"]

    @pytest.mark.asyncio
    async def test_select_ingredient_promotes_results(self, controller, client, renderer):
        client.filters["Salmon"] = [FilterResultRecord(id="S", name="s")]
        client.recipes["S"] = _recipe("S", "Baked Salmon")

        await controller.select_ingredient("Salmon")

        assert renderer.of_type(ShowSection)[-1].title == "Recipes with Salmon"
        assert client.called("find_by_ingredient") == [("find_by_ingredient", "Salmon")]
        assert [r.name for r in renderer.last().items] == ["Baked Salmon"]
        assert controller.state.current_section is Section.INGREDIENTS

    @pytest.mark.asyncio
    async def test_failed_lookup_fails_whole_drill_down(self, controller, client, renderer):
        """A lookup failing partway through shows an error instead of a partial list."""
        client.filters["Seafood"] = [FilterResultRecord(id="A", name="a"), FilterResultRecord(id="B", name="b")]
        client.recipes = {"A": _recipe("A"), "B": _recipe("B")}
        client.failing.add("get_by_id")

        await controller.select_category("Seafood")

        assert renderer.last() == ShowError(CATEGORY_RECIPES_ERROR)
        assert renderer.of_type(ShowResults) == []
        assert len(client.called("get_by_id")) == 1

    @pytest.mark.asyncio
    async def test_stale_drill_down_is_discarded(self, controller, client, renderer):
        client.filters["Seafood"] = [FilterResultRecord(id="A", name="a")]
        client.recipes["A"] = _recipe("A")
        gate = asyncio.Event()
        client.gates["Seafood"] = gate

        slow = asyncio.create_task(controller.select_category("Seafood"))
        await asyncio.sleep(0)
        await controller.navigate(Section.CONTACT)
        gate.set()
        await slow

        assert client.called("get_by_id") == []
        assert renderer.of_type(ShowResults) == []
        assert renderer.of_type(ShowNoResults) == []
        assert controller.state.current_section is Section.CONTACT


class TestSearch:
    """Tests for the search events."""

    @pytest.mark.asyncio
    async def test_search_by_name_switches_to_search(self, controller, client, renderer):
        client.by_name["cake"] = [_recipe("c1", "Cake")]
        await controller.search_by_name("cake")
        assert controller.state.current_section is Section.SEARCH
        assert controller.state.last_query == "cake"
        assert [r.name for r in renderer.last().items] == ["Cake"]

    @pytest.mark.asyncio
    async def test_cleared_search_box_shows_home_listing(self, controller, client, renderer):
        await controller.search_by_name("  ")
        assert client.called("search_by_name") == []
        assert client.called("browse_all")
        assert [r.name for r in renderer.last().items] == ["Home One"]
        assert controller.state.current_section is Section.SEARCH

    @pytest.mark.asyncio
    async def test_search_failure_shows_search_error(self, controller, client, renderer):
        client.failing.add("search_by_name")
        await controller.search_by_name("cake")
        assert renderer.last() == ShowError(SEARCH_ERROR)

    @pytest.mark.asyncio
    async def test_letter_search_ignores_multi_character_input(self, controller, client):
        await controller.search_by_letter("ab")
        assert client.called("search_by_first_letter") == []
        assert client.called("browse_all")

    @pytest.mark.asyncio
    async def test_letter_search(self, controller, client, renderer):
        client.by_letter["B"] = [_recipe("b1", "Burger")]
        await controller.search_by_letter("b")
        assert [r.name for r in renderer.last().items] == ["Burger"]

    @pytest.mark.asyncio
    async def test_id_search_found_and_missing(self, controller, client, renderer):
        client.recipes["52772"] = _recipe("52772", "Teriyaki")
        await controller.search_by_id("52772")
        assert [r.name for r in renderer.last().items] == ["Teriyaki"]

        await controller.search_by_id("0")
        assert isinstance(renderer.last(), ShowNoResults)

    @pytest.mark.asyncio
    async def test_home_failure_uses_home_error(self, controller, client, renderer):
        client.failing.add("browse_all")
        await controller.search_by_name("")
        assert renderer.last() == ShowError(HOME_ERROR)

    @pytest.mark.asyncio
    async def test_debounced_input_runs_only_last_query(self, controller, client):
        controller.search_input("chi")
        task = controller.search_input("chicken")
        await task
        assert client.called("search_by_name") == [("search_by_name", "chicken")]


class TestStaleResults:
    """Tests for the generation check."""

    @pytest.mark.asyncio
    async def test_stale_search_results_are_discarded(self, controller, client, renderer):
        client.by_name["chicken"] = [_recipe("c", "Chicken")]
        client.by_name["beef"] = [_recipe("b", "Beef")]
        gate = asyncio.Event()
        client.gates["chicken"] = gate

        slow = asyncio.create_task(controller.search_by_name("chicken"))
        await asyncio.sleep(0)
        await controller.search_by_name("beef")
        gate.set()
        await slow

        results = renderer.of_type(ShowResults)
        assert len(results) == 1
        assert results[0].items[0].name == "Beef"
        assert controller.state.last_query == "beef"

    @pytest.mark.asyncio
    async def test_stale_errors_are_discarded(self, controller, client, renderer):
        client.failing.add("list_categories")
        gate = asyncio.Event()
        client.gates["list_categories"] = gate

        slow = asyncio.create_task(controller.navigate(Section.CATEGORIES))
        await asyncio.sleep(0)
        await controller.navigate(Section.CONTACT)
        gate.set()
        await slow

        assert renderer.of_type(ShowError) == []
        assert controller.state.current_section is Section.CONTACT

    @pytest.mark.asyncio
    async def test_every_transition_bumps_generation(self, controller):
        before = controller.generation
        await controller.navigate(Section.SEARCH)
        await controller.search_by_name("x")
        assert controller.generation == before + 2


class TestDetailAndFavorites:
    """Tests for the detail view and favorite toggling."""

    @pytest.mark.asyncio
    async def test_show_recipe(self, controller, client, renderer):
        client.recipes["1"] = _recipe("1", "Pie")
        await controller.show_recipe("1")
        assert renderer.last() == ShowRecipeDetail(record=client.recipes["1"])

    @pytest.mark.asyncio
    async def test_show_missing_recipe_shows_error(self, controller, renderer):
        await controller.show_recipe("404")
        assert renderer.last() == ShowError(DETAIL_ERROR)

    @pytest.mark.asyncio
    async def test_toggle_adds_then_removes(self, controller, client, renderer):
        client.recipes["1"] = _recipe("1", "Pie")

        assert await controller.toggle_favorite("1") is FavoriteOutcome.ADDED
        assert renderer.signals[-2:] == [
            Notify("Recipe added to favorites!", LEVEL_SUCCESS),
            FavoriteChanged(recipe_id="1", is_favorite=True),
        ]
        assert await controller.is_favorite("1") is True

        assert await controller.toggle_favorite("1") is FavoriteOutcome.REMOVED
        assert renderer.signals[-2:] == [
            Notify("Recipe removed from favorites!", LEVEL_SUCCESS),
            FavoriteChanged(recipe_id="1", is_favorite=False),
        ]

    @pytest.mark.asyncio
    async def test_removing_in_favorites_section_refreshes_list(self, controller, client, favorites, renderer):
        await favorites.add(_recipe("1"))
        await controller.navigate(Section.FAVORITES)
        renderer.clear()

        await controller.toggle_favorite("1")

        assert isinstance(renderer.last(), ShowNoResults)
        assert controller.state.current_section is Section.FAVORITES

    @pytest.mark.asyncio
    async def test_toggle_unknown_recipe_notifies(self, controller, renderer):
        assert await controller.toggle_favorite("404") is None
        assert renderer.last() == Notify("Recipe could not be found.", LEVEL_ERROR)

    @pytest.mark.asyncio
    async def test_toggle_fetch_failure_notifies(self, controller, client, renderer):
        client.failing.add("get_by_id")
        assert await controller.toggle_favorite("1") is None
        assert renderer.last() == Notify("Failed to update favorite", LEVEL_ERROR)

    @pytest.mark.asyncio
    async def test_toggle_write_failure_notifies(self, client, renderer):
        client.recipes["1"] = _recipe("1")

        class ReadOnlyStore(InMemoryStore):
            def set_item(self, key, value):
                raise PersistenceError("read-only")

        controller = ViewController(client, renderer, FavoritesStore(ReadOnlyStore(), key="k"))
        assert await controller.toggle_favorite("1") is None
        assert renderer.last() == Notify("Failed to save favorites", LEVEL_ERROR)
        assert await controller.is_favorite("1") is False

    @pytest.mark.asyncio
    async def test_is_favorite_treats_unreadable_store_as_false(self, client, renderer):
        controller = ViewController(client, renderer, FavoritesStore(BrokenStore(), key="k"))
        assert await controller.is_favorite("1") is False


def test_already_present_message_level():
    from catalog.navigation import FAVORITE_MESSAGES

    assert FAVORITE_MESSAGES[FavoriteOutcome.ALREADY_PRESENT] == ("Recipe already in favorites!", LEVEL_INFO)
