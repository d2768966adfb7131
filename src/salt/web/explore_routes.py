"""Explore API: shelves, search, autocomplete and category filters."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from salt.catalog import CatalogRecipe, CuisineSection, ExploreService

from .deps import get_explore_service

router = APIRouter(prefix="/explore", tags=["explore"])


# =============================================================================
# Response Models
# =============================================================================


class RecipeCard(BaseModel):
    """Catalog recipe as shown on a card."""

    id: str
    title: str
    image_url: str
    duration: str
    cuisine: str
    category: str
    rating: str
    is_curated: bool

    @classmethod
    def from_recipe(cls, recipe: CatalogRecipe) -> "RecipeCard":
        return cls(
            id=recipe.id,
            title=recipe.title,
            image_url=recipe.display_image_url,
            duration=recipe.duration_text,
            cuisine=recipe.cuisine_text,
            category=recipe.category_text,
            rating=recipe.rating_text,
            is_curated=bool(recipe.is_curated),
        )


class SectionResponse(BaseModel):
    name: str
    key: str
    is_cuisine: bool
    has_more: bool
    recipes: list[RecipeCard]

    @classmethod
    def from_section(cls, section: CuisineSection) -> "SectionResponse":
        return cls(
            name=section.cuisine,
            key=section.key,
            is_cuisine=section.is_cuisine,
            has_more=section.has_more,
            recipes=[RecipeCard.from_recipe(r) for r in section.recipes],
        )


class ResultsResponse(BaseModel):
    """Search or category results."""

    results: list[RecipeCard]
    total: int
    has_more: bool
    title: str | None = None
    error: str | None = None


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/sections", response_model=list[SectionResponse])
async def list_sections(explore: ExploreService = Depends(get_explore_service)) -> list[SectionResponse]:
    await explore.load_initial_data()
    return [SectionResponse.from_section(s) for s in explore.sections]


@router.get("/search", response_model=ResultsResponse)
async def search_recipes(
    q: str = Query(..., min_length=1),
    explore: ExploreService = Depends(get_explore_service),
) -> ResultsResponse:
    await explore.search(q)
    return ResultsResponse(
        results=[RecipeCard.from_recipe(r) for r in explore.search_results],
        total=explore.total_results_count,
        has_more=explore.search_has_more,
        error=explore.error_message,
    )


@router.get("/autocomplete", response_model=SuggestionsResponse)
async def autocomplete(
    q: str = Query(..., min_length=1),
    explore: ExploreService = Depends(get_explore_service),
) -> SuggestionsResponse:
    """Title suggestions; debouncing is the caller's job."""
    return SuggestionsResponse(suggestions=await explore.suggest_titles(q))


@router.get("/category/{name}", response_model=ResultsResponse)
async def category_recipes(
    name: str,
    explore: ExploreService = Depends(get_explore_service),
) -> ResultsResponse:
    await explore.toggle_dish_type_filter(name, name)
    return ResultsResponse(
        results=[RecipeCard.from_recipe(r) for r in explore.search_results],
        total=explore.total_results_count,
        has_more=explore.category_has_more,
        title=explore.current_filter_title,
        error=explore.error_message,
    )
