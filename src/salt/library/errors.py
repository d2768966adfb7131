"""Errors raised by the personal recipe library (bookmarks, user recipes, images)."""


class RecipeServiceError(Exception):
    """Base class for library failures."""

    @property
    def user_message(self) -> str:
        return str(self)


class NotAuthenticated(RecipeServiceError):
    def __init__(self):
        super().__init__("Please sign in to continue")


class RecipeNotFound(RecipeServiceError):
    def __init__(self, recipe_id: str | None = None):
        self.recipe_id = recipe_id
        super().__init__("Recipe not found")


class SaveFailed(RecipeServiceError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Failed to save recipe: {message}")


class ImageUploadFailed(RecipeServiceError):
    def __init__(self, path: str | None = None):
        self.path = path
        super().__init__("Failed to upload recipe image")
