"""
Error taxonomy for the recipe catalog core.

- RemoteFetchError: transport failure, non-2xx status, or undecodable payload
- NotFoundError: a lookup resolved to nothing where the caller needed a record
- PersistenceError: the favorites storage could not be read or written
- ValidationError: malformed user input (contact form)

The ViewController turns these into renderer signals; nothing here is fatal.
"""

from typing import Dict, Optional


class CatalogError(Exception):
    """Base class for all recipe catalog errors."""


class RemoteFetchError(CatalogError):
    """
    Raised when a catalog endpoint cannot be fetched.

    Attributes:
        endpoint: Endpoint path that failed (e.g., "lookup.php")
        cause: Underlying exception (requests error, JSON decode error, ...)
    """

    def __init__(self, endpoint: str, cause: Optional[BaseException] = None) -> None:
        self.endpoint = endpoint
        self.cause = cause
        message = f"Failed to fetch {endpoint}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class NotFoundError(CatalogError):
    """Raised when a recipe id does not resolve to a record."""

    def __init__(self, recipe_id: str) -> None:
        self.recipe_id = recipe_id
        super().__init__(f"Recipe not found: {recipe_id}")


class PersistenceError(CatalogError):
    """Raised when the favorites store cannot be read or written."""


class ValidationError(CatalogError):
    """
    Raised for malformed user input.

    Attributes:
        errors: Mapping of field name to user-facing message
    """

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid input for: {fields}")
