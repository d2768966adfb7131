"""Import attempt state for one user session."""

import logging

from .errors import RecipeImportError
from .extractor import RecipeImporter
from .models import ImportedRecipe, ImportStatus

logger = logging.getLogger(__name__)

EMPTY_URL_MESSAGE = "Please enter a recipe URL"


class RecipeImportSession:
    """
    Tracks the latest import attempt: idle -> fetching -> parsed | failed.

    Retrying means calling run() again; nothing retries automatically.
    """

    def __init__(self, importer: RecipeImporter):
        self.importer = importer
        self.status = ImportStatus.IDLE
        self.recipe: ImportedRecipe | None = None
        self.error_message: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == ImportStatus.FETCHING

    async def run(self, url: str) -> ImportedRecipe | None:
        """Import from url, recording the outcome. Returns the recipe or None."""
        self.recipe = None
        self.error_message = None

        if not url or not url.strip():
            self.status = ImportStatus.FAILED
            self.error_message = EMPTY_URL_MESSAGE
            return None

        self.status = ImportStatus.FETCHING
        try:
            self.recipe = await self.importer.import_recipe(url)
        except RecipeImportError as e:
            self.status = ImportStatus.FAILED
            self.error_message = e.user_message
            logger.warning(f"Import failed for {url}: {e}")
            return None

        self.status = ImportStatus.PARSED
        return self.recipe

    def clear(self) -> None:
        self.status = ImportStatus.IDLE
        self.recipe = None
        self.error_message = None
