"""API endpoints for recipe import from external URLs."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from salt.library import RecipeServiceError, UserRecipeStore
from salt.recipe_import import ImportedRecipe, RecipeImporter, RecipeImportError
from salt.recipe_import.extractor import classify_url, normalize_url
from salt.recipe_import.models import DEFAULT_SERVINGS

from .deps import get_recipe_importer, get_user_recipe_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipe-import"])


# =============================================================================
# Request/Response Models
# =============================================================================


class ImportRequest(BaseModel):
    """Request to import a recipe from URL."""

    url: str


class RecipePreviewResponse(BaseModel):
    """Extracted recipe preview for user review."""

    title: str
    source_url: str
    description: str | None = None
    image_url: str | None = None
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None
    servings: str = DEFAULT_SERVINGS
    ingredients: list[str] = []
    instructions: list[str] = []
    source_name: str | None = None
    author: str | None = None

    @classmethod
    def from_recipe(cls, recipe: ImportedRecipe) -> "RecipePreviewResponse":
        return cls(
            title=recipe.title,
            source_url=recipe.source_url,
            description=recipe.description,
            image_url=recipe.image_url,
            prep_time_minutes=recipe.prep_time_minutes,
            cook_time_minutes=recipe.cook_time_minutes,
            total_time_minutes=recipe.total_time_minutes,
            servings=recipe.servings,
            ingredients=recipe.ingredients,
            instructions=recipe.instructions,
            source_name=recipe.source_name,
            author=recipe.author,
        )

    def to_recipe(self) -> ImportedRecipe:
        return ImportedRecipe(**self.model_dump())


class ImportResponse(BaseModel):
    """Response from recipe import attempt."""

    success: bool
    source: str | None = None  # "social" | "website"
    preview: RecipePreviewResponse | None = None
    error: str | None = None


class ConfirmResponse(BaseModel):
    """Response after saving imported recipe."""

    success: bool
    recipe_id: str | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/recipes/import", response_model=ImportResponse)
async def import_recipe(
    req: ImportRequest,
    importer: RecipeImporter = Depends(get_recipe_importer),
) -> ImportResponse:
    """
    Extract recipe data from a URL for preview.

    Social-media links go through the remote import API; other sites are
    fetched and parsed from their JSON-LD. Nothing is saved.
    """
    logger.info(f"Import request for URL: {req.url}")

    try:
        recipe = await importer.import_recipe(req.url)
    except RecipeImportError as e:
        logger.info(f"Import failed for {req.url}: {e}")
        return ImportResponse(success=False, error=e.user_message)

    return ImportResponse(
        success=True,
        source=classify_url(normalize_url(req.url)).value,
        preview=RecipePreviewResponse.from_recipe(recipe),
    )


@router.post("/recipes/import/confirm", response_model=ConfirmResponse)
async def confirm_import(
    req: RecipePreviewResponse,
    store: UserRecipeStore = Depends(get_user_recipe_store),
) -> ConfirmResponse:
    """
    Save an imported recipe after user review/edit.

    The user may have edited fields from the preview before confirming.
    """
    if not req.title.strip():
        return ConfirmResponse(success=False, error="Recipe title is required")

    if not req.instructions:
        return ConfirmResponse(success=False, error="At least one instruction step is required")

    try:
        saved = await store.save_imported_recipe(req.to_recipe())
    except RecipeServiceError as e:
        logger.exception(f"Failed to save imported recipe: {e}")
        return ConfirmResponse(success=False, error=e.user_message)

    logger.info(f"Recipe imported successfully: {saved.id}")
    return ConfirmResponse(success=True, recipe_id=saved.id)
