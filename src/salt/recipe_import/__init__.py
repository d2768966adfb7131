"""Recipe import module for extracting recipes from external URLs."""

from .errors import InvalidUrl, NetworkError, NoRecipeFound, ParsingError, RecipeImportError
from .extractor import RecipeImporter, is_social_media_url, normalize_url, validate_url
from .json_ld import find_recipe_entity, iter_recipe_entities
from .models import ImportedRecipe, ImportSource, ImportStatus
from .normalizer import normalize_recipe, parse_duration
from .session import RecipeImportSession

__all__ = [
    "ImportedRecipe",
    "ImportSource",
    "ImportStatus",
    "RecipeImporter",
    "RecipeImportSession",
    "RecipeImportError",
    "InvalidUrl",
    "NetworkError",
    "NoRecipeFound",
    "ParsingError",
    "find_recipe_entity",
    "iter_recipe_entities",
    "is_social_media_url",
    "normalize_recipe",
    "normalize_url",
    "parse_duration",
    "validate_url",
]
