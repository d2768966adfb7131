"""Pure merge and ordering helpers for catalog results.

Merges only ever append: items already shown keep their positions.
"""

from collections.abc import Iterable, Sequence

from .models import CatalogRecipe, CuisineSection

# Sections not in the configured order sort after every known one
UNKNOWN_SECTION_RANK = 999


def merge_new_by_id(
    existing: Sequence[CatalogRecipe],
    incoming: Iterable[CatalogRecipe],
) -> list[CatalogRecipe]:
    """Incoming recipes whose id is not yet present (also deduped among themselves)."""
    seen = {recipe.id for recipe in existing}
    fresh = []
    for recipe in incoming:
        if recipe.id in seen:
            continue
        seen.add(recipe.id)
        fresh.append(recipe)
    return fresh


def merge_unique(
    existing: Sequence[CatalogRecipe],
    incoming: Iterable[CatalogRecipe],
) -> list[CatalogRecipe]:
    """
    Incoming recipes new by BOTH id and case-insensitive title.

    The same dish is often stored twice under different ids, so a title
    match counts as a duplicate too.
    """
    seen_ids = {recipe.id for recipe in existing}
    seen_titles = {recipe.title_key for recipe in existing}
    fresh = []
    for recipe in incoming:
        if recipe.id in seen_ids or recipe.title_key in seen_titles:
            continue
        seen_ids.add(recipe.id)
        seen_titles.add(recipe.title_key)
        fresh.append(recipe)
    return fresh


def rank_key(recipe: CatalogRecipe) -> tuple[bool, float, int]:
    return (
        bool(recipe.is_curated),
        recipe.total_rating or 0.0,
        recipe.rating_count or 0,
    )


def rank_recipes(recipes: Iterable[CatalogRecipe]) -> list[CatalogRecipe]:
    """Curated first, then total rating, then rating count (stable)."""
    return sorted(recipes, key=rank_key, reverse=True)


def sort_sections(sections: list[CuisineSection], display_order: Sequence[str]) -> None:
    """Sort sections in place into the configured display order."""
    ranks = {name: index for index, name in enumerate(display_order)}
    sections.sort(key=lambda section: ranks.get(section.cuisine, UNKNOWN_SECTION_RANK))
