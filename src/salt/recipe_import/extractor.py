"""Main recipe import orchestration."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

import httpx

from .errors import InvalidUrl, NetworkError, NoRecipeFound, ParsingError
from .json_ld import iter_recipe_entities
from .models import ImportedRecipe, ImportSource
from .normalizer import normalize_recipe
from .social import SOCIAL_MEDIA_DOMAINS, fetch_social_recipe

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def normalize_url(url: str | None) -> str:
    """
    Trim user input and add https:// when no http(s) scheme is present.

    Examples:
        "example.com/recipe" -> "https://example.com/recipe"
        " http://a.com " -> "http://a.com"
    """
    url = (url or "").strip()
    if not url:
        return url
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


def validate_url(url: str) -> None:
    """Raise InvalidUrl unless the URL has an http(s) scheme and a host."""
    if not url:
        raise InvalidUrl(url)
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidUrl(url) from e
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise InvalidUrl(url)


def is_social_media_url(url: str) -> bool:
    """
    Case-insensitive match of the URL host against known social platforms.

    A host matches a platform domain exactly or as a subdomain, so
    "www.tiktok.com" matches "tiktok.com" but "netflix.com" does not
    match "x.com".
    """
    try:
        host = urlparse(normalize_url(url).lower()).hostname or ""
    except ValueError:
        return False
    return any(host == domain or host.endswith("." + domain) for domain in SOCIAL_MEDIA_DOMAINS)


def classify_url(url: str) -> ImportSource:
    return ImportSource.SOCIAL if is_social_media_url(url) else ImportSource.WEBSITE


class RecipeImporter:
    """
    Import one recipe from a URL.

    Import pipeline:
    1. Normalize and validate the URL
    2. Social-media URLs go to the remote import API
    3. Other websites: fetch HTML, find JSON-LD Recipe, normalize
    4. Microdata fallback (not supported, always no match)

    No retries; callers re-invoke import_recipe() to retry.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        social_import_api_url: str | None = None,
        timeout: float | None = None,
    ):
        self._http_client = http_client
        self._social_import_api_url = social_import_api_url
        self._timeout = timeout

    @property
    def social_import_api_url(self) -> str:
        if self._social_import_api_url is None:
            from salt.config import settings

            self._social_import_api_url = settings.social_import_api_url
        return self._social_import_api_url

    @property
    def timeout(self) -> float:
        if self._timeout is None:
            from salt.config import settings

            self._timeout = settings.http_timeout_seconds
        return self._timeout

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
            yield client

    async def import_recipe(self, url: str) -> ImportedRecipe:
        """
        Import a recipe, auto-detecting social media vs. regular websites.

        Raises:
            InvalidUrl, NetworkError, NoRecipeFound, ParsingError
        """
        url = normalize_url(url)
        validate_url(url)

        if is_social_media_url(url):
            logger.info(f"Importing social media recipe from {url}")
            async with self._client() as client:
                recipe = await fetch_social_recipe(client, self.social_import_api_url, url)
        else:
            logger.info(f"Importing website recipe from {url}")
            recipe = await self._import_from_website(url)

        logger.info(f"Imported recipe '{recipe.title}' from {url}")
        return recipe

    async def _import_from_website(self, url: str) -> ImportedRecipe:
        html = await self._fetch_html(url)

        for entity in iter_recipe_entities(html):
            recipe = normalize_recipe(entity, source_url=url)
            if recipe is not None:
                return recipe

        recipe = self._parse_microdata(html, url)
        if recipe is not None:
            return recipe

        logger.info(f"No structured recipe data found at {url}")
        raise NoRecipeFound(url)

    async def _fetch_html(self, url: str) -> str:
        try:
            async with self._client() as client:
                response = await client.get(url, headers=BROWSER_HEADERS)
                content = response.content
        except httpx.HTTPError as e:
            raise NetworkError(e) from e

        # Error pages still go through extraction and end in NoRecipeFound
        if not response.is_success:
            logger.info(f"Fetched {url} with status {response.status_code}")

        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParsingError("Failed to decode HTML") from e

    def _parse_microdata(self, html: str, url: str) -> ImportedRecipe | None:
        """HTML microdata is not supported; JSON-LD is the only source."""
        return None
