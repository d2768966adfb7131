"""
Recipe image storage.

Images live in a public bucket under {user_id}/{recipe_id}/. Imported
recipes from social platforms point at CDN URLs that expire, so those are
downloaded and re-uploaded here.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import httpx

from salt.db.adapter import DatabaseAdapter

from .errors import ImageUploadFailed, NotAuthenticated

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_UPLOAD = 50
MIN_IMAGE_BYTES = 1000  # smaller downloads are error pages, not images
IMPORTED_IMAGE_NAME = "imported"

TEMPORARY_IMAGE_HOSTS = (
    "cdninstagram.com",
    "instagram.com",
    "fbcdn.net",
    "tiktokcdn.com",
    "tiktok.com",
    "pinimg.com",
)


def is_temporary_url(url: str) -> bool:
    """True for social-media CDN URLs that stop working after a while."""
    return any(host in url for host in TEMPORARY_IMAGE_HOSTS)


class RecipeImageStorage:
    """Upload recipe photos for one signed-in user."""

    def __init__(
        self,
        client: DatabaseAdapter,
        user_id: str | None,
        bucket: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client = client
        self.user_id = user_id
        self._bucket = bucket
        self._http_client = http_client

    @property
    def bucket(self) -> str:
        if self._bucket is None:
            from salt.config import settings

            self._bucket = settings.recipe_images_bucket
        return self._bucket

    def _require_user(self) -> str:
        if not self.user_id:
            raise NotAuthenticated()
        return self.user_id

    def image_path(self, recipe_id: str, name: str | int) -> str:
        return f"{self._require_user()}/{recipe_id}/{name}.jpg"

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(follow_redirects=True) as client:
            yield client

    async def upload_image(self, recipe_id: str, data: bytes, name: str | int) -> str:
        """
        Upload one JPEG and return its public URL.

        Raises:
            NotAuthenticated, ImageUploadFailed
        """
        path = self.image_path(recipe_id, name)
        bucket = self.client.storage.from_(self.bucket)
        try:
            await bucket.upload(
                path=path,
                file=data,
                file_options={"content-type": "image/jpeg", "upsert": "true"},
            )
            return await bucket.get_public_url(path)
        except Exception as e:
            logger.error(f"Failed to upload image {path}: {e}")
            raise ImageUploadFailed(path) from e

    async def upload_images(self, recipe_id: str, images: Sequence[bytes]) -> list[str]:
        """
        Upload images concurrently as 0.jpg, 1.jpg, ...

        Returns public URLs in input order. Failed uploads are left out.
        """
        self._require_user()

        if len(images) >= MAX_IMAGES_PER_UPLOAD:
            logger.error(f"Invalid image count: {len(images)}, skipping upload")
            return []
        if not images:
            return []

        results = await asyncio.gather(
            *(self.upload_image(recipe_id, data, index) for index, data in enumerate(images)),
            return_exceptions=True,
        )
        urls = [url for url in results if isinstance(url, str)]
        logger.info(f"Uploaded {len(urls)}/{len(images)} images for recipe {recipe_id}")
        return urls

    async def upload_from_url(self, image_url: str, recipe_id: str) -> str | None:
        """
        Download an image and store it as {recipe_id}/imported.jpg.

        Returns the public URL, or None when the download or upload fails.
        """
        self._require_user()

        try:
            async with self._http() as http:
                response = await http.get(image_url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to download image {image_url}: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"Failed to download image: HTTP {response.status_code}")
            return None
        if len(response.content) <= MIN_IMAGE_BYTES:
            logger.warning("Downloaded data too small, likely not an image")
            return None

        try:
            url = await self.upload_image(recipe_id, response.content, IMPORTED_IMAGE_NAME)
        except ImageUploadFailed:
            return None

        logger.info(f"Re-uploaded imported image for recipe {recipe_id}")
        return url
