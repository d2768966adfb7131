"""Recipe catalog: curated dataset, remote queries, and the explore engine."""

from .curated import CuratedRecipeCatalog
from .explore import ExploreService
from .merge import merge_new_by_id, merge_unique, rank_recipes, sort_sections
from .models import CatalogRecipe, CuisineSection, SectionItem
from .queries import CatalogQueries
from .sections import DEFAULT_SECTIONS, PRIORITY_SECTIONS

__all__ = [
    "CatalogRecipe",
    "CatalogQueries",
    "CuisineSection",
    "CuratedRecipeCatalog",
    "DEFAULT_SECTIONS",
    "ExploreService",
    "PRIORITY_SECTIONS",
    "SectionItem",
    "merge_new_by_id",
    "merge_unique",
    "rank_recipes",
    "sort_sections",
]
