"""
Standardized feedback utilities for error, empty, loading and toast states.

Used by app.py to draw the status part of the renderer's view dictionary.
"""

from typing import Optional

import streamlit as st

from catalog.signals import LEVEL_ERROR, LEVEL_SUCCESS

TOAST_ICONS = {
    LEVEL_SUCCESS: "✅",
    LEVEL_ERROR: "⚠️",
}


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Show a load or validation failure.

    Args:
        message: User-facing message (one of the navigation error strings, or a form error)
        hint: Optional follow-up shown underneath, e.g. "Check your connection"
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_empty_state(title: str = "No recipes found", subtitle: Optional[str] = None) -> None:
    """
    Display a standardized empty state.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)


def show_loading(label: str = "Loading recipes…") -> None:
    """Placeholder shown while a load routine is still waiting for the catalog."""
    st.caption(f"⏳ {label}")


def show_toast(message: str, level: str) -> None:
    st.toast(message, icon=TOAST_ICONS.get(level, "ℹ️"))
