"""User-created and imported recipes (user_recipes table)."""

import logging
import uuid
from typing import Any

from salt.db.adapter import DatabaseAdapter
from salt.recipe_import.models import ImportedRecipe

from .errors import NotAuthenticated, SaveFailed
from .models import UserRecipe
from .storage import RecipeImageStorage, is_temporary_url

logger = logging.getLogger(__name__)

USER_RECIPES_TABLE = "user_recipes"


class UserRecipeStore:
    """
    CRUD over one user's recipes.

    Every query is scoped by user_id. Reads for a signed-out user are
    empty; writes raise NotAuthenticated.
    """

    def __init__(
        self,
        client: DatabaseAdapter,
        user_id: str | None,
        images: RecipeImageStorage | None = None,
    ):
        self.client = client
        self.user_id = user_id
        self.images = images or RecipeImageStorage(client, user_id)

    def _table(self) -> Any:
        return self.client.table(USER_RECIPES_TABLE)

    def _require_user(self) -> str:
        if not self.user_id:
            raise NotAuthenticated()
        return self.user_id

    async def list_recipes(self) -> list[UserRecipe]:
        """The user's recipes, newest first."""
        if not self.user_id:
            return []
        response = await (
            self._table()
            .select("*")
            .eq("user_id", self.user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [UserRecipe.model_validate(row) for row in response.data or []]

    async def count_recipes(self) -> int:
        if not self.user_id:
            return 0
        response = await (
            self._table()
            .select("id", count="exact", head=True)
            .eq("user_id", self.user_id)
            .execute()
        )
        return response.count or 0

    async def create_recipe(self, recipe: UserRecipe) -> UserRecipe:
        """Insert a recipe owned by the current user; returns the stored row."""
        user_id = self._require_user()
        recipe = recipe.model_copy(update={"user_id": user_id})

        try:
            response = await self._table().insert(recipe.insert_payload()).execute()
        except Exception as e:
            logger.error(f"Failed to create recipe '{recipe.title}': {e}")
            raise SaveFailed(str(e)) from e

        if not response.data:
            return recipe
        return UserRecipe.model_validate(response.data[0])

    async def update_recipe(self, recipe: UserRecipe) -> None:
        user_id = self._require_user()
        try:
            await (
                self._table()
                .update(recipe.update_payload())
                .eq("id", recipe.id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update recipe {recipe.id}: {e}")
            raise SaveFailed(str(e)) from e

    async def delete_recipe(self, recipe_id: str) -> None:
        user_id = self._require_user()
        await self._table().delete().eq("id", recipe_id).eq("user_id", user_id).execute()
        logger.info(f"Deleted recipe {recipe_id}")

    async def save_imported_recipe(self, recipe: ImportedRecipe) -> UserRecipe:
        """
        Save an import result as a user recipe.

        Images on temporary social CDNs are re-uploaded first; if that fails
        the original URL is kept (it may expire).
        """
        user_id = self._require_user()
        recipe_id = str(uuid.uuid4())

        image_url = recipe.image_url
        if image_url and is_temporary_url(image_url):
            permanent_url = await self.images.upload_from_url(image_url, recipe_id)
            if permanent_url:
                image_url = permanent_url
            else:
                logger.warning(f"Failed to re-upload image, keeping original URL: {image_url}")

        user_recipe = UserRecipe.from_imported(
            recipe,
            user_id=user_id,
            recipe_id=recipe_id,
            image_url=image_url,
        )
        return await self.create_recipe(user_recipe)
