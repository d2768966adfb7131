"""Personal recipe library: bookmarks, user recipes and recipe images."""

from .bookmarks import (
    BookmarkAction,
    BookmarkManager,
    BookmarkStore,
    BookmarkTransition,
    plan_bookmark_toggle,
)
from .errors import ImageUploadFailed, NotAuthenticated, RecipeNotFound, RecipeServiceError, SaveFailed
from .models import RecipeBookmark, UserRecipe, source_label
from .storage import RecipeImageStorage, is_temporary_url
from .user_recipes import UserRecipeStore

__all__ = [
    "BookmarkAction",
    "BookmarkManager",
    "BookmarkStore",
    "BookmarkTransition",
    "plan_bookmark_toggle",
    "RecipeServiceError",
    "NotAuthenticated",
    "RecipeNotFound",
    "SaveFailed",
    "ImageUploadFailed",
    "RecipeBookmark",
    "UserRecipe",
    "source_label",
    "RecipeImageStorage",
    "is_temporary_url",
    "UserRecipeStore",
]
