"""Recipe import error taxonomy.

All errors are terminal for one import attempt. Callers retry by importing
again with the same or a corrected URL.
"""


class RecipeImportError(Exception):
    """Base class for recipe import failures."""

    @property
    def user_message(self) -> str:
        return "Failed to import recipe. Please try again."


class InvalidUrl(RecipeImportError):
    """The URL is empty, malformed, or not http(s)."""

    def __init__(self, url: str | None = None):
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")

    @property
    def user_message(self) -> str:
        return "Invalid URL. Please check the link and try again."


class NetworkError(RecipeImportError):
    """The page or import API could not be reached."""

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(f"Network error: {cause}")

    @property
    def user_message(self) -> str:
        return f"Network error: {self.cause}"


class NoRecipeFound(RecipeImportError):
    """The page was fetched but contains no recognizable recipe."""

    def __init__(self, url: str | None = None):
        self.url = url
        super().__init__(f"No recipe found at {url}" if url else "No recipe found")

    @property
    def user_message(self) -> str:
        return "No recipe found on this page. Make sure the link points to a recipe."


class ParsingError(RecipeImportError):
    """The response could not be decoded or the import API reported an error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return f"Failed to parse recipe: {self.message}"
