"""
Streamlit renderer for catalog signals.

Streamlit redraws the whole script on every interaction, so signals can't be
drawn the moment they are emitted. StreamlitRenderer folds them into a plain
view dictionary kept in session state; app.py draws that dictionary on each run.

View dictionary keys:
- header: latest ShowSection (or None)
- status: "idle" | "loading" | "results" | "no_results" | "error"
- items / kind: contents of the latest ShowResults
- error: message of the latest ShowError
- detail: RecipeRecord opened in the detail panel (or None)
- toasts: pending (message, level) notifications, drained by the app
- favorite_ids: ids currently favorited, kept in sync by FavoriteChanged

This module does not import streamlit, so it can be tested with a plain dict.
"""

from typing import Any, Dict, Iterable, List, MutableMapping, Tuple

from catalog.signals import (
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

# Session state key for the view dictionary
VIEW_KEY = "recipe_view"


def empty_view() -> Dict[str, Any]:
    return {
        "header": None,
        "status": "idle",
        "items": (),
        "kind": None,
        "error": None,
        "detail": None,
        "toasts": [],
        "favorite_ids": set(),
    }


class StreamlitRenderer(BaseRenderer):
    """
    Records the current view into a session-state mapping.

    Args:
        state: st.session_state in the app, any dict in tests
    """

    def __init__(self, state: MutableMapping[str, Any]) -> None:
        self.state = state
        if VIEW_KEY not in self.state:
            self.state[VIEW_KEY] = empty_view()

    @property
    def view(self) -> Dict[str, Any]:
        return self.state[VIEW_KEY]

    def emit(self, signal: Signal) -> None:
        view = self.view
        if isinstance(signal, ShowSection):
            view["header"] = signal
            view["status"] = "idle"
            view["items"] = ()
            view["kind"] = None
            view["error"] = None
        elif isinstance(signal, ShowLoading):
            view["status"] = "loading"
            view["error"] = None
        elif isinstance(signal, ShowResults):
            view["status"] = "results"
            view["items"] = signal.items
            view["kind"] = signal.kind
        elif isinstance(signal, ShowNoResults):
            view["status"] = "no_results"
            view["items"] = ()
        elif isinstance(signal, ShowError):
            view["status"] = "error"
            view["error"] = signal.message
        elif isinstance(signal, ShowRecipeDetail):
            view["detail"] = signal.record
        elif isinstance(signal, Notify):
            view["toasts"].append((signal.message, signal.level))
        elif isinstance(signal, FavoriteChanged):
            if signal.is_favorite:
                view["favorite_ids"].add(signal.recipe_id)
            else:
                view["favorite_ids"].discard(signal.recipe_id)

    def set_favorite_ids(self, recipe_ids: Iterable[str]) -> None:
        self.view["favorite_ids"] = set(recipe_ids)

    def close_detail(self) -> None:
        self.view["detail"] = None

    def drain_toasts(self) -> List[Tuple[str, str]]:
        toasts = list(self.view["toasts"])
        self.view["toasts"].clear()
        return toasts
