"""
Recipe bookmarks with optimistic toggling.

The bookmark set changes locally at once; the server write follows and the
change is rolled back if it fails.
"""

import logging
from collections.abc import Set
from dataclasses import dataclass
from enum import Enum
from typing import Any

from salt.catalog.models import CatalogRecipe
from salt.db.adapter import DatabaseAdapter

from .errors import NotAuthenticated

logger = logging.getLogger(__name__)

BOOKMARKS_TABLE = "user_recipe_bookmarks"


class BookmarkAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class BookmarkTransition:
    """Planned toggle of one recipe: the state before and the optimistic state after."""

    recipe_id: str
    previous: frozenset[str]
    optimistic: frozenset[str]
    action: BookmarkAction

    @property
    def is_bookmarked(self) -> bool:
        """Bookmark state of the recipe if the write succeeds."""
        return self.action == BookmarkAction.ADD

    def resolve(self, succeeded: bool) -> frozenset[str]:
        return self.optimistic if succeeded else self.previous


def plan_bookmark_toggle(current: Set[str], recipe_id: str) -> BookmarkTransition:
    previous = frozenset(current)
    if recipe_id in previous:
        return BookmarkTransition(recipe_id, previous, previous - {recipe_id}, BookmarkAction.REMOVE)
    return BookmarkTransition(recipe_id, previous, previous | {recipe_id}, BookmarkAction.ADD)


class BookmarkStore:
    """Server-side bookmarks for one user."""

    def __init__(self, client: DatabaseAdapter, user_id: str | None):
        self.client = client
        self.user_id = user_id

    def _table(self) -> Any:
        return self.client.table(BOOKMARKS_TABLE)

    def _require_user(self) -> str:
        if not self.user_id:
            raise NotAuthenticated()
        return self.user_id

    async def get_bookmarked_ids(self) -> set[str]:
        if not self.user_id:
            return set()
        response = await self._table().select("recipe_id").eq("user_id", self.user_id).execute()
        return {str(row["recipe_id"]) for row in response.data or []}

    async def get_bookmarked_recipes(self) -> list[CatalogRecipe]:
        """Bookmarked catalog recipes, most recently bookmarked first."""
        if not self.user_id:
            return []
        response = await (
            self._table()
            .select("bookmarked_at, recipes(*)")
            .eq("user_id", self.user_id)
            .order("bookmarked_at", desc=True)
            .execute()
        )
        return [
            CatalogRecipe.model_validate(row["recipes"])
            for row in response.data or []
            if row.get("recipes")
        ]

    async def add_bookmark(self, recipe_id: str) -> None:
        user_id = self._require_user()
        await self._table().insert({"user_id": user_id, "recipe_id": recipe_id}).execute()

    async def remove_bookmark(self, recipe_id: str) -> None:
        user_id = self._require_user()
        await self._table().delete().eq("user_id", user_id).eq("recipe_id", recipe_id).execute()

    async def toggle_bookmark(self, recipe_id: str) -> bool:
        """Flip the server state; returns whether the recipe is now bookmarked."""
        if recipe_id in await self.get_bookmarked_ids():
            await self.remove_bookmark(recipe_id)
            return False
        await self.add_bookmark(recipe_id)
        return True


class BookmarkManager:
    """Session-wide bookmark set. Call load() once after sign-in."""

    def __init__(self, store: BookmarkStore):
        self.store = store
        self.bookmarked_ids: frozenset[str] = frozenset()
        self.is_loading = False

    async def load(self) -> None:
        self.is_loading = True
        try:
            self.bookmarked_ids = frozenset(await self.store.get_bookmarked_ids())
        except Exception as e:
            logger.error(f"Failed to load bookmarks: {e}")
        finally:
            self.is_loading = False

    async def refresh(self) -> None:
        await self.load()

    def is_bookmarked(self, recipe_id: str) -> bool:
        return recipe_id in self.bookmarked_ids

    async def toggle(self, recipe_id: str) -> bool:
        """
        Toggle optimistically and sync with the server.

        Returns the resulting bookmark state (the previous one after a rollback).
        """
        transition = plan_bookmark_toggle(self.bookmarked_ids, recipe_id)
        self.bookmarked_ids = transition.optimistic

        try:
            if transition.action == BookmarkAction.ADD:
                await self.store.add_bookmark(recipe_id)
            else:
                await self.store.remove_bookmark(recipe_id)
        except Exception as e:
            logger.warning(f"Bookmark sync failed for {recipe_id}, rolling back: {e}")
            self.bookmarked_ids = transition.resolve(succeeded=False)
            return not transition.is_bookmarked

        return transition.is_bookmarked
