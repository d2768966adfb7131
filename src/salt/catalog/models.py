"""Catalog data models."""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# Image proxies whose original URL travels in a `url=` query parameter
PROXY_IMAGE_HOSTS = ("imagesvc.meredithcorp.io",)


def parse_number(value: Any) -> float | None:
    """Float from a number or numeric string; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


class CatalogRecipe(BaseModel):
    """
    Server-persisted recipe (recipes table).

    Read-only to the client. Numeric rating fields may arrive as strings
    (bundled dataset) and are parsed at load time.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str
    created_at: str | None = None
    updated_at: str | None = None

    description: str | None = None
    image_url: str | None = None
    source_url: str | None = None
    source_name: str | None = None
    image_width: int | None = None
    image_height: int | None = None

    prep_time_iso: str | None = None
    cook_time_iso: str | None = None
    total_time_iso: str | None = None
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None

    servings: int | None = None
    servings_text: str | None = None

    ingredients: list[str] = []
    instructions: list[str] = []

    categories: list[str] | None = None
    cuisines: list[str] | None = None

    author: str | None = None

    rating: float | None = None
    rating_count: int | None = None
    is_curated: bool | None = None
    total_rating: float | None = None

    nutrition: dict[str, Any] | None = None
    published_at: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> str:
        return str(value)

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("rating", "total_rating", mode="before")
    @classmethod
    def _rating_as_number(cls, value: Any) -> float | None:
        return parse_number(value)

    @model_validator(mode="before")
    @classmethod
    def _derive_total_rating(cls, data: Any) -> Any:
        """total_rating = rating * rating_count when the row lacks it."""
        if not isinstance(data, dict) or data.get("total_rating") not in (None, ""):
            return data
        rating = parse_number(data.get("rating"))
        count = data.get("rating_count")
        if rating is not None and isinstance(count, int) and not isinstance(count, bool):
            data = {**data, "total_rating": rating * count}
        return data

    # -------------------------------------------------------------------------
    # Display helpers
    # -------------------------------------------------------------------------

    @property
    def title_key(self) -> str:
        """Case-insensitive title used for duplicate detection."""
        return self.title.lower()

    @property
    def display_image_url(self) -> str:
        """
        Image URL with known proxy wrappers removed.

        Example:
            https://imagesvc.meredithcorp.io/v3/mm/image?url=https%3A%2F%2Fimages.example.com%2Fa.jpg
            -> https://images.example.com/a.jpg
        """
        url = self.image_url
        if not url:
            return ""
        if any(host in url for host in PROXY_IMAGE_HOSTS):
            _, marker, encoded = url.partition("url=")
            if marker:
                return unquote(encoded)
        return url

    @property
    def effective_total_minutes(self) -> int:
        """Prep + cook when both known and disagreeing with the stored total."""
        calculated = (self.prep_time_minutes or 0) + (self.cook_time_minutes or 0)
        stored = self.total_time_minutes
        if stored and stored > 0:
            return calculated if calculated > 0 and calculated != stored else stored
        return calculated

    @property
    def duration_text(self) -> str:
        total = self.effective_total_minutes
        if total <= 0:
            return "N/A"
        if total >= 60:
            hours, mins = divmod(total, 60)
            return f"{hours}h {mins}m" if mins else f"{hours}h"
        return f"{total} min"

    @property
    def cuisine_text(self) -> str:
        if not self.cuisines:
            return "Various"
        return ", ".join(self.cuisines[:2])

    @property
    def category_text(self) -> str:
        if not self.categories:
            return "General"
        return self.categories[0]

    @property
    def rating_text(self) -> str:
        return "N/A" if self.rating is None else f"{self.rating:.1f}"


@dataclass(frozen=True)
class SectionItem:
    """A configured catalog shelf: a cuisine or a category tag."""

    name: str  # Database value (e.g., "Seafood", "Mexican")
    display_name: str
    is_cuisine: bool  # True = query 'cuisines', False = query 'categories'

    @property
    def column(self) -> str:
        return "cuisines" if self.is_cuisine else "categories"


@dataclass
class CuisineSection:
    """One horizontally scrolling shelf of recipes, grown page by page."""

    cuisine: str  # display name
    key: str
    is_cuisine: bool
    recipes: list[CatalogRecipe] = field(default_factory=list)
    has_more: bool = True
    current_page: int = 0
    is_loading_more: bool = False
    is_loaded: bool = False
    total_count: int = 0

    @property
    def recipe_ids(self) -> set[str]:
        return {recipe.id for recipe in self.recipes}
