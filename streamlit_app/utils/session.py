"""
Session wiring for the Streamlit front-end.

The catalog client (with its response cache), the favorites store and the
ViewController live in st.session_state, so they persist across reruns within
one browser session. Refreshing the page starts a new session with an empty
cache; favorites survive because they are stored on disk.
"""

import asyncio
import logging
from typing import Awaitable, Tuple, TypeVar

import streamlit as st

from catalog.config import UIConfig
from catalog.connectors.mealdb_connector import MealDBConnector
from catalog.errors import PersistenceError
from catalog.favorites import FavoritesStore, JsonFileStore
from catalog.navigation import ViewController

from streamlit_app.utils.renderer import StreamlitRenderer

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTROLLER_KEY = "view_controller"
RENDERER_KEY = "view_renderer"
STARTED_KEY = "view_started"


def run_async(coro: Awaitable[T]) -> T:
    """Run a controller coroutine to completion from Streamlit's script thread."""
    return asyncio.run(coro)


async def submit_name_search(controller: ViewController, query: str) -> None:
    """Route a name-box change through the keystroke debouncer and wait for the search to settle."""
    await controller.search_input(query)


def get_or_create_controller() -> Tuple[ViewController, StreamlitRenderer]:
    """
    Get or create the ViewController and its renderer for this browser session.

    Returns:
        (controller, renderer) tuple
    """
    if CONTROLLER_KEY not in st.session_state:
        renderer = StreamlitRenderer(st.session_state)
        controller = ViewController(
            client=MealDBConnector(),
            renderer=renderer,
            favorites=FavoritesStore(JsonFileStore()),
            debounce_seconds=UIConfig.get_debounce_seconds(),
        )
        st.session_state[RENDERER_KEY] = renderer
        st.session_state[CONTROLLER_KEY] = controller
    return st.session_state[CONTROLLER_KEY], st.session_state[RENDERER_KEY]


def ensure_started(controller: ViewController, renderer: StreamlitRenderer) -> None:
    """Load the home listing and favorite badges once per session."""
    if st.session_state.get(STARTED_KEY):
        return
    st.session_state[STARTED_KEY] = True
    try:
        favorites = run_async(controller.favorites.list())
    except PersistenceError as e:
        logger.warning("Could not read favorites: %s", e)
        favorites = []
    renderer.set_favorite_ids(record.id for record in favorites)
    run_async(controller.start())
