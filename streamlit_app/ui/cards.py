"""
Card grids and the recipe detail panel.

Each card takes its action callbacks as arguments; app.py binds them to the
ViewController. Buttons use on_click so the action runs before the rerun draws
the updated view.
"""

from typing import Callable, Collection, Sequence

import streamlit as st

from catalog.models import Area, Category, Ingredient, RecipeRecord

PLACEHOLDER_IMAGE = "https://www.themealdb.com/images/media/meals/llcbn01574260722.jpg/preview"
GRID_COLUMNS = 4
DESCRIPTION_PREVIEW_CHARS = 160


def _truncate(text: str, limit: int = DESCRIPTION_PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rsplit(" ", 1)[0] + "…"


def recipe_grid(
    recipes: Sequence[RecipeRecord],
    favorite_ids: Collection[str],
    on_view: Callable[[str], None],
    on_toggle_favorite: Callable[[str], None],
) -> None:
    """Render recipes as cards with View and favorite buttons."""
    columns = st.columns(GRID_COLUMNS)
    for index, recipe in enumerate(recipes):
        with columns[index % GRID_COLUMNS]:
            with st.container(border=True):
                st.image(recipe.image_url or PLACEHOLDER_IMAGE, use_container_width=True)
                st.markdown(f"**{recipe.name}**")
                badges = " · ".join(part for part in (recipe.category, recipe.area) if part)
                if badges:
                    st.caption(badges)
                st.caption(f"ID: {recipe.id}")
                view_col, fav_col = st.columns(2)
                with view_col:
                    st.button("View", key=f"view_{index}_{recipe.id}", on_click=on_view, args=(recipe.id,),
                              use_container_width=True)
                with fav_col:
                    is_favorite = recipe.id in favorite_ids
                    st.button("❤️" if is_favorite else "🤍", key=f"fav_{index}_{recipe.id}",
                              on_click=on_toggle_favorite, args=(recipe.id,), use_container_width=True,
                              help="Remove from favorites" if is_favorite else "Add to favorites")


def category_grid(categories: Sequence[Category], on_select: Callable[[str], None]) -> None:
    columns = st.columns(GRID_COLUMNS)
    for index, category in enumerate(categories):
        with columns[index % GRID_COLUMNS]:
            with st.container(border=True):
                st.image(category.image_url or PLACEHOLDER_IMAGE, use_container_width=True)
                st.markdown(f"**{category.name}**")
                if category.description:
                    st.caption(_truncate(category.description))
                st.button("Browse", key=f"category_{category.name}", on_click=on_select,
                          args=(category.name,), use_container_width=True)


def area_grid(areas: Sequence[Area], on_select: Callable[[str], None]) -> None:
    columns = st.columns(GRID_COLUMNS)
    for index, area in enumerate(areas):
        with columns[index % GRID_COLUMNS]:
            with st.container(border=True):
                st.markdown(f"🌍 **{area.name}**")
                st.caption("Cuisine Area")
                st.button("Browse", key=f"area_{area.name}", on_click=on_select,
                          args=(area.name,), use_container_width=True)


def ingredient_grid(ingredients: Sequence[Ingredient], on_select: Callable[[str], None]) -> None:
    columns = st.columns(GRID_COLUMNS)
    for index, ingredient in enumerate(ingredients):
        with columns[index % GRID_COLUMNS]:
            with st.container(border=True):
                st.markdown(f"🍴 **{ingredient.name}**")
                if ingredient.description:
                    st.caption(_truncate(ingredient.description))
                st.button("Browse", key=f"ingredient_{index}_{ingredient.name}", on_click=on_select,
                          args=(ingredient.name,), use_container_width=True)


def recipe_detail(
    recipe: RecipeRecord,
    is_favorite: bool,
    on_close: Callable[[], None],
    on_toggle_favorite: Callable[[str], None],
) -> None:
    """Render the full recipe: image, facts, instructions, ingredients, tags, links."""
    with st.container(border=True):
        title_col, close_col = st.columns([5, 1])
        with title_col:
            st.subheader(recipe.name)
        with close_col:
            st.button("Close", key="detail_close", on_click=on_close, use_container_width=True)

        image_col, info_col = st.columns([1, 2])
        with image_col:
            if recipe.image_url:
                st.image(recipe.image_url, use_container_width=True)
            st.button("Remove from favorites" if is_favorite else "Add to favorites", key="detail_fav",
                      on_click=on_toggle_favorite, args=(recipe.id,), use_container_width=True)
        with info_col:
            if recipe.category:
                st.markdown(f"**Category:** {recipe.category}")
            if recipe.area:
                st.markdown(f"**Area:** {recipe.area}")

            lines = recipe.ingredient_lines()
            if lines:
                st.markdown("#### Ingredients")
                st.markdown("\n".join(f"- {line.display()}" for line in lines))

            tags = recipe.tag_list()
            if tags:
                st.markdown("#### Tags")
                st.markdown(" ".join(f"`{tag}`" for tag in tags))

            links = []
            if recipe.source_url:
                links.append(f"[Source]({recipe.source_url})")
            if recipe.video_url:
                links.append(f"[Watch on YouTube]({recipe.video_url})")
            if links:
                st.markdown(" · ".join(links))

        if recipe.instructions:
            st.markdown("#### Instructions")
            st.write(recipe.instructions)
