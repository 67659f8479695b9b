"""
Configuration management for Recipe Finder.

This module centralizes environment variable loading from the .env file at the
project root. It is imported by the connectors and the Streamlit entry point so
.env is loaded before anything reads the environment.

When no .env exists, load_dotenv() is a no-op and the process environment is used.

Environment Variables:
- MEALDB_BASE_URL: Optional, defaults to "https://www.themealdb.com/api/json/v1/1"
- CATALOG_CACHE_TTL_SECONDS: Optional, response cache lifetime (default: 300)
- CATALOG_REQUEST_TIMEOUT_SECONDS: Optional, per-request timeout (default: unset, no timeout)
- SEARCH_DEBOUNCE_MS: Optional, keystroke debounce delay (default: 300)
- FAVORITES_PATH: Optional, favorites file (default: ~/.recipe_finder/favorites.json)
- FAVORITES_STORAGE_KEY: Optional, key the favorites list is stored under (default: "recipeFavorites")
- LOG_LEVEL: Optional, logging level name (default: "INFO")
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.themealdb.com/api/json/v1/1"
DEFAULT_CACHE_TTL_SECONDS = 300.0
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_FAVORITES_PATH = Path.home() / ".recipe_finder" / "favorites.json"
DEFAULT_FAVORITES_STORAGE_KEY = "recipeFavorites"


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    The project root is found by going up from this file's location
    (catalog/config.py -> catalog/ -> project root).

    Safe to call multiple times; existing environment variables take precedence.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _read_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid value for %s=%r, using default %r", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive value for %s=%r, using default %r", name, raw, default)
        return default
    return value


class CatalogConfig:
    """Configuration for the remote catalog client and its cache."""

    @staticmethod
    def get_base_url() -> str:
        """
        Get the catalog API base URL.

        Returns:
            Base URL with trailing slash removed
        """
        return os.getenv("MEALDB_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

    @staticmethod
    def get_cache_ttl_seconds() -> float:
        """Get the response cache TTL in seconds (default: 300)."""
        return _read_float("CATALOG_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)

    @staticmethod
    def get_request_timeout_seconds() -> Optional[float]:
        """
        Get the per-request timeout.

        Returns:
            Timeout in seconds, or None when unset (requests then waits indefinitely)
        """
        return _read_float("CATALOG_REQUEST_TIMEOUT_SECONDS", None)


class UIConfig:
    """Configuration for the interactive front-end."""

    @staticmethod
    def get_debounce_seconds() -> float:
        """Get the search keystroke debounce delay in seconds (default: 0.3)."""
        millis = _read_float("SEARCH_DEBOUNCE_MS", float(DEFAULT_DEBOUNCE_MS))
        return millis / 1000.0

    @staticmethod
    def get_log_level() -> str:
        """Get the logging level name (default: "INFO")."""
        return os.getenv("LOG_LEVEL", "INFO").upper()


class FavoritesConfig:
    """Configuration for the local favorites store."""

    @staticmethod
    def get_path() -> Path:
        """Get the favorites file path (default: ~/.recipe_finder/favorites.json)."""
        raw = os.getenv("FAVORITES_PATH")
        if raw:
            return Path(raw).expanduser()
        return DEFAULT_FAVORITES_PATH

    @staticmethod
    def get_storage_key() -> str:
        """Get the key the favorites list is stored under (default: "recipeFavorites")."""
        return os.getenv("FAVORITES_STORAGE_KEY", DEFAULT_FAVORITES_STORAGE_KEY)


def get_config_summary() -> Dict[str, Any]:
    """
    Get the effective configuration values.

    Returns:
        Dictionary with keys: base_url, cache_ttl_seconds, request_timeout_seconds,
        debounce_seconds, favorites_path, favorites_storage_key, log_level
    """
    return {
        "base_url": CatalogConfig.get_base_url(),
        "cache_ttl_seconds": CatalogConfig.get_cache_ttl_seconds(),
        "request_timeout_seconds": CatalogConfig.get_request_timeout_seconds(),
        "debounce_seconds": UIConfig.get_debounce_seconds(),
        "favorites_path": str(FavoritesConfig.get_path()),
        "favorites_storage_key": FavoritesConfig.get_storage_key(),
        "log_level": UIConfig.get_log_level(),
    }
