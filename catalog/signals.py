"""
Rendering boundary between the catalog core and the UI layer.

The core never draws anything. It emits signals through a BaseRenderer that the
UI layer provides (Streamlit in streamlit_app/, a RecordingRenderer in tests).

Signals:
- ShowSection: page header, breadcrumb and which input panels are visible
- ShowLoading: a load routine started
- ShowResults: a list of displayable items (recipes, categories, areas, ingredients)
- ShowNoResults: the load finished with nothing to show
- ShowError: the load failed; `message` is user-facing
- ShowRecipeDetail: a single recipe opened in the detail view
- Notify: toast-style notification (favorites outcomes)
- FavoriteChanged: a recipe's favorite state flipped
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from catalog.models import RecipeRecord

# ShowResults.kind values
KIND_RECIPES = "recipes"
KIND_CATEGORIES = "categories"
KIND_AREAS = "areas"
KIND_INGREDIENTS = "ingredients"

# Notify.level values
LEVEL_SUCCESS = "success"
LEVEL_INFO = "info"
LEVEL_ERROR = "error"


@dataclass(frozen=True)
class ShowSection:
    section: str
    title: str
    subtitle: str
    breadcrumb: Optional[str] = None
    show_search: bool = False
    show_contact_form: bool = False


@dataclass(frozen=True)
class ShowLoading:
    pass


@dataclass(frozen=True)
class ShowResults:
    items: Tuple[Any, ...]
    kind: str = KIND_RECIPES


@dataclass(frozen=True)
class ShowNoResults:
    pass


@dataclass(frozen=True)
class ShowError:
    message: str


@dataclass(frozen=True)
class ShowRecipeDetail:
    record: RecipeRecord


@dataclass(frozen=True)
class Notify:
    message: str
    level: str = LEVEL_INFO


@dataclass(frozen=True)
class FavoriteChanged:
    recipe_id: str
    is_favorite: bool


Signal = Union[
    ShowSection,
    ShowLoading,
    ShowResults,
    ShowNoResults,
    ShowError,
    ShowRecipeDetail,
    Notify,
    FavoriteChanged,
]


class BaseRenderer(ABC):
    """Abstract base class for anything that turns signals into a visible UI."""

    @abstractmethod
    def emit(self, signal: Signal) -> None:
        """Present one signal. Must not raise for any of the signal types above."""


class RecordingRenderer(BaseRenderer):
    """Renderer that just records signals, for tests and headless runs."""

    def __init__(self) -> None:
        self.signals: List[Signal] = []

    def emit(self, signal: Signal) -> None:
        self.signals.append(signal)

    def of_type(self, signal_type: type) -> List[Signal]:
        return [signal for signal in self.signals if isinstance(signal, signal_type)]

    def last(self) -> Optional[Signal]:
        return self.signals[-1] if self.signals else None

    def clear(self) -> None:
        self.signals.clear()
