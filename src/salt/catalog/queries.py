"""
Remote catalog queries against the recipes table.

All ranked queries order by curated desc, total_rating desc, rating_count
desc, rating desc, id asc (stable tiebreak). Pagination uses inclusive
range offsets. Every query is bounded by a timeout so callers can fall
back to a simpler query shape.
"""

import asyncio
import logging
from typing import Any

from salt.db.adapter import DatabaseAdapter

from .models import CatalogRecipe

logger = logging.getLogger(__name__)

RECIPES_TABLE = "recipes"

SEARCH_PREFIX = "{query}%"
SEARCH_CONTAINS = "%{query}%"


def tag_filter_value(value: str) -> str:
    """PostgreSQL array literal for a contains (@>) filter: {"value"}."""
    return '{"' + value.replace('"', '\\"') + '"}'


def _ranked(query: Any) -> Any:
    return (
        query.order("is_curated", desc=True)
        .order("total_rating", desc=True)
        .order("rating_count", desc=True)
        .order("rating", desc=True)
        .order("id")
    )


def _to_recipes(rows: list[dict] | None) -> list[CatalogRecipe]:
    return [CatalogRecipe.model_validate(row) for row in rows or []]


class CatalogQueries:
    """Query helpers over any PostgREST-style client (Supabase in production)."""

    def __init__(self, client: DatabaseAdapter, timeout: float | None = None):
        self.client = client
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        if self._timeout is None:
            from salt.config import settings

            self._timeout = settings.query_timeout_seconds
        return self._timeout

    def _table(self) -> Any:
        return self.client.table(RECIPES_TABLE)

    async def _execute(self, query: Any) -> Any:
        return await asyncio.wait_for(query.execute(), timeout=self.timeout)

    # =========================================================================
    # Title search
    # =========================================================================

    async def search_titles(
        self,
        query: str,
        start: int,
        end: int,
        prefix: bool = False,
    ) -> list[CatalogRecipe]:
        """Ranked page of recipes whose title starts with / contains query."""
        pattern = (SEARCH_PREFIX if prefix else SEARCH_CONTAINS).format(query=query)
        builder = _ranked(self._table().select("*").ilike("title", pattern)).range(start, end)
        response = await self._execute(builder)
        return _to_recipes(response.data)

    async def search_titles_simple(self, query: str, limit: int = 20) -> list[CatalogRecipe]:
        """Prefix-only ranked search with a plain limit (search fallback)."""
        pattern = SEARCH_PREFIX.format(query=query)
        builder = _ranked(self._table().select("*").ilike("title", pattern)).limit(limit)
        response = await self._execute(builder)
        return _to_recipes(response.data)

    async def count_titles(self, query: str) -> int:
        """Exact count of title-contains matches; 0 on failure."""
        pattern = SEARCH_CONTAINS.format(query=query)
        try:
            builder = self._table().select("id", count="exact", head=True).ilike("title", pattern)
            response = await self._execute(builder)
            return response.count or 0
        except Exception as e:
            logger.warning(f"Failed to get search count for '{query}': {e}")
            return 0

    async def title_suggestions(self, query: str, prefix: bool, limit: int = 15) -> list[str]:
        """Titles only (no ranking), for autocomplete."""
        pattern = (SEARCH_PREFIX if prefix else SEARCH_CONTAINS).format(query=query)
        builder = self._table().select("title").ilike("title", pattern).limit(limit)
        response = await self._execute(builder)
        return [row["title"] for row in response.data or [] if row.get("title")]

    # =========================================================================
    # Tag (cuisine / category) browsing
    # =========================================================================

    async def fetch_by_tag(
        self,
        column: str,
        value: str,
        start: int,
        end: int,
    ) -> list[CatalogRecipe]:
        """Fully ranked page of recipes tagged with value."""
        builder = self._table().select("*").filter(column, "cs", tag_filter_value(value))
        response = await self._execute(_ranked(builder).range(start, end))
        return _to_recipes(response.data)

    async def fetch_section_page(
        self,
        column: str,
        value: str,
        start: int,
        end: int,
    ) -> list[CatalogRecipe]:
        """
        Shelf page: curated desc, total_rating desc, id asc.

        Falls back to rating-only ordering when the curated sort fails
        (large tags time out on it).
        """
        base = self._table().select("*").filter(column, "cs", tag_filter_value(value))
        try:
            builder = (
                base.order("is_curated", desc=True)
                .order("total_rating", desc=True)
                .order("id")
                .range(start, end)
            )
            response = await self._execute(builder)
        except Exception as e:
            logger.warning(f"Curated query failed for {value}, trying fallback: {e}")
            return await self.fetch_by_tag_simple(column, value, start, end)
        return _to_recipes(response.data)

    async def fetch_by_tag_simple(
        self,
        column: str,
        value: str,
        start: int,
        end: int,
    ) -> list[CatalogRecipe]:
        """Rating-only ordering, the cheap shape for large tags."""
        builder = (
            self._table()
            .select("*")
            .filter(column, "cs", tag_filter_value(value))
            .order("rating", desc=True)
            .range(start, end)
        )
        response = await self._execute(builder)
        return _to_recipes(response.data)

    async def count_by_tag(self, column: str, value: str) -> int:
        """Exact count of recipes tagged with value; 0 on failure."""
        try:
            builder = (
                self._table()
                .select("id", count="exact", head=True)
                .filter(column, "cs", tag_filter_value(value))
            )
            response = await self._execute(builder)
            return response.count or 0
        except Exception as e:
            logger.warning(f"Failed to get count for {column}={value}: {e}")
            return 0

    # =========================================================================
    # Other listings
    # =========================================================================

    async def fetch_top_rated(self, limit: int = 10) -> list[CatalogRecipe]:
        response = await self._execute(_ranked(self._table().select("*")).limit(limit))
        return _to_recipes(response.data)

    async def fetch_by_max_time(self, max_minutes: int, limit: int = 10) -> list[CatalogRecipe]:
        """Curated first, then quickest, then total rating."""
        builder = (
            self._table()
            .select("*")
            .lte("total_time_minutes", max_minutes)
            .order("is_curated", desc=True)
            .order("total_time_minutes")
            .order("total_rating", desc=True)
            .order("id")
            .limit(limit)
        )
        response = await self._execute(builder)
        return _to_recipes(response.data)
