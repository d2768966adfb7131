"""Data models for recipe import."""

import re
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SERVINGS = "2 servings"


class ImportSource(str, Enum):
    """Path used to import a recipe."""

    SOCIAL = "social"
    WEBSITE = "website"


class ImportStatus(str, Enum):
    """Lifecycle of one import attempt: idle -> fetching -> parsed | failed."""

    IDLE = "idle"
    FETCHING = "fetching"
    PARSED = "parsed"
    FAILED = "failed"


@dataclass(frozen=True)
class ImportedRecipe:
    """Normalized recipe produced by one import call."""

    title: str
    source_url: str
    description: str | None = None
    image_url: str | None = None
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    total_time_minutes: int | None = None
    servings: str = DEFAULT_SERVINGS
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    source_name: str | None = None
    author: str | None = None

    @property
    def total_minutes(self) -> int:
        """Total time, or prep + cook when no total was given (0 if unknown)."""
        if self.total_time_minutes:
            return self.total_time_minutes
        return (self.prep_time_minutes or 0) + (self.cook_time_minutes or 0)

    @property
    def servings_count(self) -> int:
        """
        Leading number of the servings text.

        Examples:
            "4 servings" -> 4
            "Makes 12 cookies" -> 12
            "a crowd" -> 2
        """
        match = re.search(r"\d+", self.servings)
        return int(match.group(0)) if match else 2
