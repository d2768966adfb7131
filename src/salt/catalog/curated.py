"""
Curated recipe catalog loaded from the bundled dataset.

Gives instant, offline results for explore shelves and search before the
remote catalog answers.
"""

import json
import logging
from collections import defaultdict
from pathlib import Path

from pydantic import ValidationError

from .models import CatalogRecipe

logger = logging.getLogger(__name__)

BUNDLED_DATASET = Path(__file__).resolve().parent.parent / "data" / "curated_recipes.json"


class CuratedRecipeCatalog:
    """
    In-memory curated recipes, indexed by cuisine and by category.

    Construct explicitly and call load() once; refresh() re-reads the file.
    A missing or unreadable dataset leaves the catalog empty.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else BUNDLED_DATASET
        self._recipes: list[CatalogRecipe] = []
        self._by_cuisine: dict[str, list[CatalogRecipe]] = {}
        self._by_category: dict[str, list[CatalogRecipe]] = {}
        self._ids: set[str] = set()
        self.is_loaded = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load(self) -> "CuratedRecipeCatalog":
        """Load the dataset if not loaded yet."""
        if not self.is_loaded:
            self._load()
        return self

    def refresh(self) -> "CuratedRecipeCatalog":
        """Drop cached data and reload from disk."""
        self._reset()
        self._load()
        return self

    def _reset(self) -> None:
        self._recipes = []
        self._by_cuisine = {}
        self._by_category = {}
        self._ids = set()
        self.is_loaded = False

    def _load(self) -> None:
        if not self.path.exists():
            logger.error(f"Curated recipes dataset not found: {self.path}")
            return

        try:
            rows = json.loads(self.path.read_text(encoding="utf-8"))
            recipes = [CatalogRecipe.model_validate(row) for row in rows]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error(f"Failed to load curated recipes from {self.path}: {e}")
            return

        by_cuisine: dict[str, list[CatalogRecipe]] = defaultdict(list)
        by_category: dict[str, list[CatalogRecipe]] = defaultdict(list)
        for recipe in recipes:
            for cuisine in recipe.cuisines or []:
                by_cuisine[cuisine].append(recipe)
            for category in recipe.categories or []:
                by_category[category].append(recipe)

        for index in (by_cuisine, by_category):
            for shelf in index.values():
                shelf.sort(key=lambda r: r.total_rating or 0.0, reverse=True)

        self._recipes = recipes
        self._by_cuisine = dict(by_cuisine)
        self._by_category = dict(by_category)
        self._ids = {recipe.id for recipe in recipes}
        self.is_loaded = True

        logger.info(
            f"Loaded {len(recipes)} curated recipes "
            f"({len(self._by_cuisine)} cuisines, {len(self._by_category)} categories)"
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    @property
    def recipes(self) -> list[CatalogRecipe]:
        return list(self._recipes)

    def recipes_for_cuisine(self, cuisine: str) -> list[CatalogRecipe]:
        return list(self._by_cuisine.get(cuisine, []))

    def recipes_for_category(self, category: str) -> list[CatalogRecipe]:
        return list(self._by_category.get(category, []))

    def recipes_for_section(self, name: str, is_cuisine: bool, limit: int = 6) -> list[CatalogRecipe]:
        """Top recipes for a shelf by total rating, highest first."""
        index = self._by_cuisine if is_cuisine else self._by_category
        return index.get(name, [])[:limit]

    @property
    def available_cuisines(self) -> list[str]:
        return sorted(self._by_cuisine)

    @property
    def available_categories(self) -> list[str]:
        return sorted(self._by_category)

    def is_curated(self, recipe_id: str) -> bool:
        return str(recipe_id) in self._ids

    def search(self, query: str, limit: int = 20) -> list[CatalogRecipe]:
        """
        Title substring search.

        Prefix matches first, then by total rating.
        """
        if not query:
            return []

        needle = query.lower()
        matches = [recipe for recipe in self._recipes if needle in recipe.title_key]
        matches.sort(
            key=lambda r: (r.title_key.startswith(needle), r.total_rating or 0.0),
            reverse=True,
        )
        return matches[:limit]
