"""
Recipe Finder Pro - Streamlit Frontend Main Entry Point.

Run with:
    streamlit run streamlit_app/app.py

The page is a thin shell around catalog.navigation.ViewController: sidebar
navigation, search inputs and card buttons call controller actions, and the
StreamlitRenderer's view dictionary is drawn on every rerun.
"""

import sys
from pathlib import Path

# Add project root to path so `catalog` and `streamlit_app` import however the app is run
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import logging

import streamlit as st

from catalog.config import UIConfig
from catalog.errors import ValidationError
from catalog.navigation import Section
from catalog.signals import KIND_AREAS, KIND_CATEGORIES, KIND_INGREDIENTS, KIND_RECIPES
from catalog.validation import validate_contact_form

from streamlit_app.ui.cards import area_grid, category_grid, ingredient_grid, recipe_detail, recipe_grid
from streamlit_app.ui.feedback import show_empty_state, show_error, show_loading, show_toast
from streamlit_app.utils.session import ensure_started, get_or_create_controller, run_async, submit_name_search

logging.basicConfig(level=UIConfig.get_log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Finder Pro",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="expanded",
)

NAV_LABELS = {
    Section.HOME: "🏠 Home",
    Section.SEARCH: "🔍 Search",
    Section.CATEGORIES: "📂 Categories",
    Section.AREAS: "🌍 Areas",
    Section.INGREDIENTS: "🍴 Ingredients",
    Section.RANDOM: "🎲 Random Recipe",
    Section.RANDOM_BATCH: "🎰 Random Selection",
    Section.LATEST: "🆕 Latest",
    Section.FAVORITES: "❤️ Favorites",
    Section.CONTACT: "✉️ Contact",
}

controller, renderer = get_or_create_controller()
ensure_started(controller, renderer)


def _navigate() -> None:
    run_async(controller.navigate(st.session_state["nav_section"]))


def _search_name() -> None:
    run_async(submit_name_search(controller, st.session_state.get("name_search", "")))


def _search_letter() -> None:
    run_async(controller.search_by_letter(st.session_state.get("letter_search", "")))


def _search_id() -> None:
    run_async(controller.search_by_id(st.session_state.get("id_search", "")))


def _show_recipe(recipe_id: str) -> None:
    run_async(controller.show_recipe(recipe_id))


def _toggle_favorite(recipe_id: str) -> None:
    run_async(controller.toggle_favorite(recipe_id))


def _select_category(name: str) -> None:
    run_async(controller.select_category(name))


def _select_area(name: str) -> None:
    run_async(controller.select_area(name))


def _select_ingredient(name: str) -> None:
    run_async(controller.select_ingredient(name))


with st.sidebar:
    st.markdown("### 🍳 **Recipe Finder Pro**")
    st.divider()
    st.radio(
        "Browse",
        options=list(NAV_LABELS),
        format_func=lambda section: NAV_LABELS[section],
        key="nav_section",
        on_change=_navigate,
        label_visibility="collapsed",
    )
    st.divider()
    st.caption("Recipes from TheMealDB")

view = renderer.view
header = view["header"]
if header is not None:
    if header.breadcrumb:
        st.caption(f"Home / {header.breadcrumb}")
    st.title(header.title)
    st.caption(header.subtitle)

if header is not None and header.show_search:
    name_col, letter_col, id_col = st.columns([3, 1, 1])
    with name_col:
        st.text_input("Search by name", key="name_search", on_change=_search_name, placeholder="e.g. Arrabiata")
    with letter_col:
        st.text_input("First letter", key="letter_search", on_change=_search_letter, max_chars=1)
    with id_col:
        st.text_input("Recipe ID", key="id_search", on_change=_search_id, placeholder="e.g. 52772")

if header is not None and header.show_contact_form:
    with st.form("contact_form", clear_on_submit=False):
        name = st.text_input("Name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        confirm_password = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Send message")
    if submitted:
        try:
            validate_contact_form(name, email, password, confirm_password)
        except ValidationError as e:
            for message in e.errors.values():
                show_error(message)
        else:
            st.success("Thank you for your message! We will get back to you soon.")

if view["detail"] is not None:
    recipe_detail(
        view["detail"],
        is_favorite=view["detail"].id in view["favorite_ids"],
        on_close=renderer.close_detail,
        on_toggle_favorite=_toggle_favorite,
    )

status = view["status"]
if status == "loading":
    show_loading()
elif status == "error":
    show_error(view["error"], hint="Check your connection and try again.")
elif status == "no_results":
    show_empty_state("No recipes found", "Try a different search or browse by category.")
elif status == "results":
    kind = view["kind"]
    if kind == KIND_RECIPES:
        recipe_grid(view["items"], view["favorite_ids"], on_view=_show_recipe, on_toggle_favorite=_toggle_favorite)
    elif kind == KIND_CATEGORIES:
        category_grid(view["items"], on_select=_select_category)
    elif kind == KIND_AREAS:
        area_grid(view["items"], on_select=_select_area)
    elif kind == KIND_INGREDIENTS:
        ingredient_grid(view["items"], on_select=_select_ingredient)

for message, level in renderer.drain_toasts():
    show_toast(message, level)
