"""Social-media recipe import through the remote import API.

Short-video and social posts carry no structured data, so the backend
scrapes captions/video and returns a recipe in its own shape.
"""

import logging
from typing import Any

import httpx

from .errors import NetworkError, NoRecipeFound, ParsingError
from .loose_json import as_dict, as_int, as_str, as_str_list
from .models import DEFAULT_SERVINGS, ImportedRecipe

logger = logging.getLogger(__name__)

SOCIAL_MEDIA_DOMAINS = (
    "tiktok.com",
    "vm.tiktok.com",
    "instagram.com",
    "instagr.am",
    "youtube.com",
    "youtu.be",
    "facebook.com",
    "fb.watch",
    "twitter.com",
    "x.com",
)

UNTITLED_RECIPE = "Untitled Recipe"


async def fetch_social_recipe(
    client: httpx.AsyncClient,
    api_url: str,
    url: str,
) -> ImportedRecipe:
    """
    Ask the import API to extract a recipe from a social-media URL.

    The API is told not to persist anything; saving is the caller's choice.

    Raises:
        ParsingError: API reported an error or returned an unreadable body
        NoRecipeFound: API found no recipe in the post
        NetworkError: transport failure or non-2xx status without a message
    """
    try:
        response = await client.post(
            api_url,
            json={"url": url, "saveToDatabase": False},
            headers={"Content-Type": "application/json"},
        )
    except httpx.HTTPError as e:
        raise NetworkError(e) from e

    if not response.is_success:
        error = as_str((as_dict(_json_or_none(response)) or {}).get("error"))
        if error:
            raise ParsingError(error)
        raise NetworkError(f"HTTP {response.status_code}")

    body = as_dict(_json_or_none(response))
    if body is None:
        raise ParsingError("Invalid API response")

    if body.get("success") is not True:
        if body.get("isRecipe") is False:
            raise NoRecipeFound(url)
        raise ParsingError(as_str(body.get("error")) or "Import failed")

    recipe = as_dict(body.get("recipe"))
    if recipe is None:
        raise NoRecipeFound(url)

    return parse_api_recipe(recipe, source_url=url)


def parse_api_recipe(data: dict[str, Any], source_url: str) -> ImportedRecipe:
    """Map the import API's recipe object, defaulting anything missing."""
    return ImportedRecipe(
        title=as_str(data.get("title")) or UNTITLED_RECIPE,
        source_url=source_url,
        description=as_str(data.get("description")),
        image_url=as_str(data.get("imageUrl")),
        prep_time_minutes=as_int(data.get("prepTimeMinutes")),
        cook_time_minutes=as_int(data.get("cookTimeMinutes")),
        total_time_minutes=as_int(data.get("totalTimeMinutes")),
        servings=as_str(data.get("servings")) or DEFAULT_SERVINGS,
        ingredients=list(as_str_list(data.get("ingredients")) or []),
        instructions=list(as_str_list(data.get("instructions")) or []),
        source_name=as_str(data.get("sourceName")),
    )


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
