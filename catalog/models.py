"""
Recipe catalog models.

This module defines the canonical schemas used throughout the catalog core.
The remote catalog (TheMealDB) returns flat objects with `str`-prefixed keys
(`idMeal`, `strMeal`, `strIngredient1`..`strIngredient20`, ...). Connectors map
those raw payloads into the models below before anything else sees them.

- RecipeRecord: a fully detailed recipe (search, lookup, random, latest endpoints)
- FilterResultRecord: the id/name/thumbnail projection returned by filter endpoints
- Category, Area, Ingredient: reference lists used for drill-down navigation

NOTE: Blank strings and whitespace-only strings coming from the API are treated
as absent. The API pads missing ingredient slots with "" or " " and sometimes
null, and all three mean the same thing.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# The API exposes ingredient/measure slots strIngredient1..strIngredient20
MAX_INGREDIENT_SLOTS = 20


def clean_text(value: Any) -> Optional[str]:
    """
    Normalize an API string field.

    Returns:
        The stripped string, or None when the value is missing or blank.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class IngredientLine(BaseModel):
    """One (ingredient, measure) slot of a recipe. Either side may be absent."""

    position: int = Field(..., ge=1, le=MAX_INGREDIENT_SLOTS, description="1-based slot number from the API")
    ingredient: Optional[str] = Field(None, description="Ingredient name")
    measure: Optional[str] = Field(None, description="Measure text, e.g. '2 tbsp'")

    model_config = ConfigDict(frozen=True)

    def display(self) -> str:
        """Return the 'measure ingredient' label used on recipe detail views."""
        return " ".join(part for part in (self.measure, self.ingredient) if part)


class RecipeRecord(BaseModel):
    """
    A fully detailed recipe.

    Records are immutable once received. Two records describe the same recipe
    iff their ids are equal; the favorites list is keyed on `id`.
    """

    id: str = Field(..., min_length=1, description="Opaque recipe identifier (idMeal)")
    name: str = Field(..., description="Display name (strMeal)")
    category: Optional[str] = Field(None, description="Category name (strCategory)")
    area: Optional[str] = Field(None, description="Area / cuisine (strArea)")
    instructions: Optional[str] = Field(None, description="Free-text instructions")
    image_url: Optional[str] = Field(None, description="Thumbnail URL (strMealThumb)")
    ingredients: List[IngredientLine] = Field(default_factory=list, description="Ordered ingredient slots")
    tags: Optional[str] = Field(None, description="Comma-separated tag list (strTags)")
    source_url: Optional[str] = Field(None, description="External source URL (strSource)")
    video_url: Optional[str] = Field(None, description="Video URL (strYoutube)")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "RecipeRecord":
        """
        Build a RecipeRecord from a raw `meals[]` entry.

        All 20 ingredient slots are scanned: an empty slot in the middle does not
        mean the remaining slots are empty too.

        Raises:
            ValueError: If the payload has no id or no name.
        """
        recipe_id = clean_text(payload.get("idMeal"))
        name = clean_text(payload.get("strMeal"))
        if not recipe_id or not name:
            raise ValueError(f"Recipe payload is missing idMeal/strMeal: {str(payload)[:100]}")

        ingredients: List[IngredientLine] = []
        for position in range(1, MAX_INGREDIENT_SLOTS + 1):
            ingredient = clean_text(payload.get(f"strIngredient{position}"))
            measure = clean_text(payload.get(f"strMeasure{position}"))
            if ingredient is None and measure is None:
                continue
            ingredients.append(IngredientLine(position=position, ingredient=ingredient, measure=measure))

        return cls(
            id=recipe_id,
            name=name,
            category=clean_text(payload.get("strCategory")),
            area=clean_text(payload.get("strArea")),
            instructions=clean_text(payload.get("strInstructions")),
            image_url=clean_text(payload.get("strMealThumb")),
            ingredients=ingredients,
            tags=clean_text(payload.get("strTags")),
            source_url=clean_text(payload.get("strSource")),
            video_url=clean_text(payload.get("strYoutube")),
        )

    @classmethod
    def from_stored(cls, payload: Dict[str, Any]) -> "RecipeRecord":
        """
        Load a record from the favorites store.

        Accepts both our own serialized form and raw API objects, which is what
        earlier versions of the favorites list held.
        """
        if "idMeal" in payload:
            return cls.from_api(payload)
        return cls.model_validate(payload)

    def tag_list(self) -> List[str]:
        """Split the comma-separated tag string into trimmed, non-empty tags."""
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    def ingredient_lines(self) -> List[IngredientLine]:
        """Return only the slots that name an ingredient (what detail views list)."""
        return [line for line in self.ingredients if line.ingredient]


class FilterResultRecord(BaseModel):
    """
    Lightweight record returned by the filter endpoints.

    Only id, name and thumbnail are available; it must be promoted to a
    RecipeRecord (see catalog.details) before it can be shown in full.
    """

    id: str = Field(..., min_length=1, description="Recipe identifier (idMeal)")
    name: str = Field(..., description="Display name (strMeal)")
    image_url: Optional[str] = Field(None, description="Thumbnail URL (strMealThumb)")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "FilterResultRecord":
        recipe_id = clean_text(payload.get("idMeal"))
        name = clean_text(payload.get("strMeal"))
        if not recipe_id or not name:
            raise ValueError(f"Filter payload is missing idMeal/strMeal: {str(payload)[:100]}")
        return cls(id=recipe_id, name=name, image_url=clean_text(payload.get("strMealThumb")))


class Category(BaseModel):
    """A recipe category (categories.php)."""

    name: str = Field(..., description="Category name (strCategory)")
    description: Optional[str] = Field(None, description="Category description")
    image_url: Optional[str] = Field(None, description="Category thumbnail URL")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Category":
        name = clean_text(payload.get("strCategory"))
        if not name:
            raise ValueError("Category payload is missing strCategory")
        return cls(
            name=name,
            description=clean_text(payload.get("strCategoryDescription")),
            image_url=clean_text(payload.get("strCategoryThumb")),
        )


class Area(BaseModel):
    """A cuisine area (list.php?a=list). The name doubles as the filter key."""

    name: str = Field(..., description="Area name (strArea)")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Area":
        name = clean_text(payload.get("strArea"))
        if not name:
            raise ValueError("Area payload is missing strArea")
        return cls(name=name)


class Ingredient(BaseModel):
    """An ingredient from the reference list (list.php?i=list)."""

    name: str = Field(..., description="Ingredient name (strIngredient)")
    description: Optional[str] = Field(None, description="Ingredient description")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Ingredient":
        name = clean_text(payload.get("strIngredient"))
        if not name:
            raise ValueError("Ingredient payload is missing strIngredient")
        return cls(name=name, description=clean_text(payload.get("strDescription")))
