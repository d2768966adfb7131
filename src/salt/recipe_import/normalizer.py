"""Normalization of Recipe structured data into ImportedRecipe."""

import logging
import re
from typing import Any
from urllib.parse import urlparse

from .loose_json import (
    JSONValue,
    as_dict,
    as_int,
    as_list,
    as_non_empty_str,
    as_str,
    as_str_list,
    first,
)
from .models import DEFAULT_SERVINGS, ImportedRecipe

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?", re.IGNORECASE)


def parse_duration(duration: JSONValue) -> int | None:
    """
    Parse ISO 8601 duration to whole minutes.

    Seconds are ignored. Returns None for missing, unparseable, or zero
    durations.

    Examples:
        PT30M -> 30
        PT1H -> 60
        PT1H30M -> 90
        PT0H0M -> None
    """
    if not isinstance(duration, str):
        return None

    match = _DURATION_PATTERN.search(duration)
    if not match:
        return None

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    total = hours * 60 + minutes
    return total if total > 0 else None


def extract_image_url(image: JSONValue) -> str | None:
    """
    Extract image URL from various formats.

    Handles:
        - Plain URL string
        - Dict with 'url' field
        - List of either (take first)
    """
    image = first(image)
    if isinstance(image, str):
        return image
    if isinstance(image, dict):
        return as_str(image.get("url"))
    return None


def extract_servings(recipe_yield: JSONValue) -> str:
    """
    Extract servings text from recipeYield, never empty.

    Examples:
        "4 servings" -> "4 servings"
        6 -> "6 servings"
        ["8", "8 servings"] -> "8"
        None -> "2 servings"
    """
    value = first(recipe_yield)

    text = as_non_empty_str(value)
    if text:
        return text

    count = as_int(value)
    if count is not None and count > 0:
        return f"{count} servings"

    return DEFAULT_SERVINGS


def extract_ingredients(ingredients: JSONValue) -> list[str]:
    """Ingredient lines, trimmed. Anything but a list of strings yields []."""
    lines = as_str_list(ingredients)
    if lines is None:
        return []
    return [line.strip() for line in lines]


def extract_instructions(instructions: JSONValue) -> list[str]:
    """
    Extract instruction steps in document order.

    Handles:
        - List of strings
        - List of HowToStep dicts with 'text' field
        - HowToSection dicts with nested 'itemListElement' steps (one level)
        - Single string, split on newlines

    Bare strings mixed in with step objects are section labels, not steps.
    """
    if isinstance(instructions, str):
        return [line.strip() for line in instructions.splitlines() if line.strip()]

    items = as_list(instructions)
    if items is None:
        return []

    if as_str_list(items) is not None:
        return [item.strip() for item in items if item.strip()]

    steps: list[str] = []
    for item in items:
        entry = as_dict(item)
        if entry is None:
            continue

        text = as_str(entry.get("text"))
        if text is not None:
            if text.strip():
                steps.append(text.strip())
            continue

        for step in as_list(entry.get("itemListElement")) or []:
            step_text = as_str((as_dict(step) or {}).get("text"))
            if step_text and step_text.strip():
                steps.append(step_text.strip())

    return steps


def extract_source_name(data: dict[str, Any], source_url: str) -> str | None:
    """Publisher name, else the URL host without its 'www.' prefix."""
    publisher = as_dict(data.get("publisher"))
    if publisher:
        name = as_str(publisher.get("name"))
        if name:
            return name

    host = urlparse(source_url).hostname
    if not host:
        return None
    return host.removeprefix("www.")


def extract_author(author: JSONValue) -> str | None:
    """Author from a string, a Person dict, or the first of a list of either."""
    author = first(author)
    if isinstance(author, str):
        return author
    if isinstance(author, dict):
        return as_str(author.get("name"))
    return None


def normalize_recipe(data: dict[str, Any], source_url: str) -> ImportedRecipe | None:
    """
    Convert a Recipe-typed structured data dict into an ImportedRecipe.

    Returns None when the recipe has no title, which is the only
    validation gate. Every other field degrades to a default.
    """
    title = as_non_empty_str(data.get("name"))
    if not title:
        logger.debug(f"Recipe entity without a name at {source_url}, skipping")
        return None

    prep_time = parse_duration(data.get("prepTime"))
    cook_time = parse_duration(data.get("cookTime"))
    total_time = parse_duration(data.get("totalTime"))
    if total_time is None:
        combined = (prep_time or 0) + (cook_time or 0)
        total_time = combined if combined > 0 else None

    return ImportedRecipe(
        title=title,
        source_url=source_url,
        description=as_str(data.get("description")),
        image_url=extract_image_url(data.get("image")),
        prep_time_minutes=prep_time,
        cook_time_minutes=cook_time,
        total_time_minutes=total_time,
        servings=extract_servings(data.get("recipeYield")),
        ingredients=extract_ingredients(data.get("recipeIngredient")),
        instructions=extract_instructions(data.get("recipeInstructions")),
        source_name=extract_source_name(data, source_url),
        author=extract_author(data.get("author")),
    )
