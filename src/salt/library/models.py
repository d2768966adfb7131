"""Data models for a user's own recipes and bookmarks."""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from salt.recipe_import.models import ImportedRecipe

# Insert/update payload columns of the user_recipes table
UPDATABLE_COLUMNS = (
    "title",
    "description",
    "image_url",
    "prep_time_minutes",
    "cook_time_minutes",
    "total_time_minutes",
    "servings",
    "servings_text",
    "ingredients",
    "instructions",
    "cuisines",
    "dish_types",
    "notes",
    "photos",
)


def source_label(source_url: str | None) -> str:
    """
    Origin tag stored with a user recipe.

    Examples:
        "https://www.instagram.com/p/abc" -> "imported_instagram"
        "https://youtu.be/xyz" -> "imported_youtube"
        None -> "manual"
    """
    if not source_url:
        return "manual"
    lowered = source_url.lower()
    if "instagram" in lowered:
        return "imported_instagram"
    if "youtube" in lowered or "youtu.be" in lowered:
        return "imported_youtube"
    if "tiktok" in lowered:
        return "imported_tiktok"
    return "imported_web"


class UserRecipe(BaseModel):
    """A recipe owned by one user (user_recipes table)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    created_at: str | None = None
    updated_at: str | None = None

    title: str
    description: str | None = None
    image_url: str | None = None

    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None

    servings: int | None = None
    servings_text: str | None = None

    ingredients: list[str] = []
    instructions: list[str] = []

    cuisines: list[str] | None = None
    dish_types: list[str] | None = None
    notes: str | None = None

    source_url: str | None = None
    source_name: str | None = None
    photos: list[str] | None = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _uuid_as_str(cls, value: Any) -> str:
        return str(value)

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_imported(
        cls,
        recipe: ImportedRecipe,
        user_id: str,
        recipe_id: str | None = None,
        image_url: str | None = None,
    ) -> "UserRecipe":
        """
        Build a user recipe from an import result.

        image_url overrides the imported image (e.g. after re-uploading it).
        """
        final_image = image_url or recipe.image_url
        return cls(
            id=recipe_id or str(uuid.uuid4()),
            user_id=user_id,
            title=recipe.title,
            description=recipe.description,
            image_url=final_image,
            prep_time_minutes=recipe.prep_time_minutes,
            cook_time_minutes=recipe.cook_time_minutes,
            total_time_minutes=recipe.total_time_minutes,
            servings_text=recipe.servings,
            ingredients=list(recipe.ingredients),
            instructions=list(recipe.instructions),
            source_url=recipe.source_url,
            source_name=recipe.source_name,
            photos=[final_image] if final_image else None,
        )

    @property
    def source(self) -> str:
        return source_label(self.source_url)

    @property
    def ingredient_count(self) -> int:
        return len(self.ingredients)

    @property
    def display_image_url(self) -> str:
        """First photo, else the image URL."""
        if self.photos and self.photos[0]:
            return self.photos[0]
        return self.image_url or ""

    @property
    def duration_text(self) -> str:
        calculated = (self.prep_time_minutes or 0) + (self.cook_time_minutes or 0)
        stored = self.total_time_minutes
        if stored and stored > 0:
            total = calculated if calculated > 0 and calculated != stored else stored
        else:
            total = calculated
        if total <= 0:
            return "N/A"
        if total >= 60:
            hours, mins = divmod(total, 60)
            return f"{hours}h {mins}m" if mins else f"{hours}h"
        return f"{total} min"

    def update_payload(self) -> dict[str, Any]:
        return self.model_dump(include=set(UPDATABLE_COLUMNS))

    def insert_payload(self) -> dict[str, Any]:
        """Row for insert: updatable columns plus identity and origin."""
        payload = self.update_payload()
        payload.pop("dish_types", None)
        payload.update(
            id=self.id,
            user_id=self.user_id,
            source_url=self.source_url,
            source_name=self.source_name,
            source=self.source,
        )
        return payload


class RecipeBookmark(BaseModel):
    """A user's bookmark of a catalog recipe (user_recipe_bookmarks table)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    recipe_id: str
    bookmarked_at: str | None = None
    is_favorite: bool | None = None

    @field_validator("id", "user_id", "recipe_id", mode="before")
    @classmethod
    def _uuid_as_str(cls, value: Any) -> str:
        return str(value)
