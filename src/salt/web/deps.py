"""Service factories injected into route handlers (overridable in tests)."""

from functools import lru_cache

from fastapi import Depends

from salt.catalog import CatalogQueries, CuratedRecipeCatalog, ExploreService
from salt.db.client import get_authenticated_client, get_client
from salt.library import UserRecipeStore
from salt.recipe_import import RecipeImporter

from .auth import AuthenticatedUser, get_current_user


@lru_cache
def get_curated_catalog() -> CuratedRecipeCatalog:
    """Process-wide curated catalog, loaded on first use."""
    from salt.config import settings

    return CuratedRecipeCatalog(settings.curated_recipes_path).load()


def get_recipe_importer() -> RecipeImporter:
    return RecipeImporter()


async def get_explore_service() -> ExploreService:
    """A fresh explore session per request over the anonymous client."""
    client = await get_client()
    return ExploreService(CatalogQueries(client), get_curated_catalog())


async def get_user_recipe_store(
    user: AuthenticatedUser = Depends(get_current_user),
) -> UserRecipeStore:
    client = await get_authenticated_client(user.access_token)
    return UserRecipeStore(client, user.id)
