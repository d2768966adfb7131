"""
Explore engine: curated-first browsing, search, filters and autocomplete.

Every access pattern is optimistic local-first: bundled curated results are
shown immediately, then remote results are merged in as they arrive.
Merges only append, so items already shown never move.

One ExploreService belongs to one session and is its only writer.
"""

import asyncio
import logging
from collections.abc import Sequence

from .curated import CuratedRecipeCatalog
from .merge import merge_new_by_id, merge_unique, rank_recipes, sort_sections
from .models import CatalogRecipe, CuisineSection, SectionItem
from .queries import CatalogQueries
from .sections import DEFAULT_SECTIONS

logger = logging.getLogger(__name__)

LOCAL_SECTION_LIMIT = 6  # curated recipes per shelf on first paint
REMOTE_SECTION_LIMIT = 4  # server recipes merged into each shelf
SECTION_PAGE_SIZE = 6
SEARCH_PAGE_SIZE = 20
LOCAL_SEARCH_LIMIT = 10
CONTAINS_PASS_THRESHOLD = 10  # run the contains pass below this many prefix hits
SIMPLE_SEARCH_LIMIT = 20
CATEGORY_FALLBACK_PAGE_SIZE = 10

AUTOCOMPLETE_FETCH_LIMIT = 15  # over-fetch to survive duplicate titles
AUTOCOMPLETE_MAX_SUGGESTIONS = 8
AUTOCOMPLETE_CONTAINS_THRESHOLD = 6

SEARCH_FAILED_MESSAGE = "Search failed. Please try again."


class ExploreService:
    """
    Session state and operations behind the explore screen.

    Collaborators are injected: a loaded CuratedRecipeCatalog and
    CatalogQueries over the backend.
    """

    def __init__(
        self,
        queries: CatalogQueries,
        curated: CuratedRecipeCatalog,
        sections: Sequence[SectionItem] = DEFAULT_SECTIONS,
        page_size: int = SEARCH_PAGE_SIZE,
        autocomplete_delay: float | None = None,
    ):
        self.queries = queries
        self.curated = curated
        self.section_items = list(sections)
        self.page_size = page_size
        self._autocomplete_delay = autocomplete_delay

        self.sections: list[CuisineSection] = []
        self.search_results: list[CatalogRecipe] = []
        self.autocomplete_suggestions: list[str] = []
        self.current_filter_title: str | None = None
        self.selected_dish_type: str | None = None

        self.is_loading = False
        self.is_loading_more = False
        self.search_has_more = False
        self.category_has_more = False
        self.total_results_count = 0
        self.error_message: str | None = None

        self.current_search_query = ""
        self.search_offset = 0
        self.category_offset = 0
        self._autocomplete_task: asyncio.Task | None = None

    @property
    def autocomplete_delay(self) -> float:
        if self._autocomplete_delay is None:
            from salt.config import settings

            self._autocomplete_delay = settings.autocomplete_debounce_seconds
        return self._autocomplete_delay

    @property
    def section_order(self) -> list[str]:
        return [item.display_name for item in self.section_items]

    def find_section(self, display_name: str) -> CuisineSection | None:
        return next((s for s in self.sections if s.cuisine == display_name), None)

    def _section_item(self, display_name: str) -> SectionItem | None:
        return next((i for i in self.section_items if i.display_name == display_name), None)

    # =========================================================================
    # Sections
    # =========================================================================

    async def load_initial_data(self) -> None:
        """Show curated shelves instantly, then merge server recipes into them."""
        self.is_loading = True
        self.error_message = None

        sections = []
        for item in self.section_items:
            recipes = self.curated.recipes_for_section(
                item.name, item.is_cuisine, limit=LOCAL_SECTION_LIMIT
            )
            if recipes:
                sections.append(
                    CuisineSection(
                        cuisine=item.display_name,
                        key=item.name,
                        is_cuisine=item.is_cuisine,
                        recipes=recipes,
                        is_loaded=True,
                    )
                )
        sort_sections(sections, self.section_order)
        self.sections = sections
        self.is_loading = False
        logger.info(f"Loaded {len(sections)} sections from curated recipes")

        await self.fetch_additional_recipes(self.section_items)

    async def _fetch_section_remote(self, item: SectionItem) -> tuple[SectionItem, list[CatalogRecipe]] | None:
        try:
            recipes = await self.fetch_recipes_for_section(item, page=0, limit=REMOTE_SECTION_LIMIT)
        except Exception as e:
            logger.warning(f"Failed to fetch {item.display_name} from server: {e}")
            return None
        return item, recipes

    async def fetch_additional_recipes(self, items: Sequence[SectionItem]) -> None:
        """
        Fetch a few server recipes per section concurrently and merge them.

        Results are merged as they complete; a failed section keeps its
        local recipes. Sections are re-sorted into display order at the end.
        """
        pending = [self._fetch_section_remote(item) for item in items]
        for completed in asyncio.as_completed(pending):
            result = await completed
            if result is None:
                continue
            item, recipes = result
            if not recipes:
                continue

            section = self.find_section(item.display_name)
            if section is not None:
                fresh = merge_new_by_id(section.recipes, recipes)
                if fresh:
                    section.recipes.extend(fresh)
                    logger.info(f"Added {len(fresh)} server recipes to '{item.display_name}'")
            else:
                fresh = merge_new_by_id([], recipes)
                self.sections.append(
                    CuisineSection(
                        cuisine=item.display_name,
                        key=item.name,
                        is_cuisine=item.is_cuisine,
                        recipes=fresh,
                        has_more=len(recipes) >= REMOTE_SECTION_LIMIT,
                        is_loaded=True,
                    )
                )
                logger.info(f"Created section '{item.display_name}' with {len(fresh)} server recipes")

        sort_sections(self.sections, self.section_order)

    async def fetch_recipes_for_section(
        self,
        item: SectionItem,
        page: int = 0,
        limit: int = SECTION_PAGE_SIZE,
    ) -> list[CatalogRecipe]:
        start = page * limit
        return await self.queries.fetch_section_page(item.column, item.name, start, start + limit - 1)

    async def load_initial_recipes(self, display_name: str) -> None:
        """Lazily load the first page of a section that has not loaded yet."""
        section = self.find_section(display_name)
        if section is None or section.is_loaded:
            return
        item = self._section_item(display_name)
        if item is None:
            logger.warning(f"No configured section for '{display_name}'")
            return

        try:
            recipes = await self.fetch_recipes_for_section(item, page=0, limit=SECTION_PAGE_SIZE)
        except Exception as e:
            logger.warning(f"Failed to load recipes for '{display_name}': {e}")
            return

        section.recipes = merge_new_by_id([], recipes)
        section.is_loaded = True
        section.current_page = 0
        section.has_more = len(recipes) >= SECTION_PAGE_SIZE

    async def load_more_recipes(self, display_name: str) -> None:
        """Append the next page to a section."""
        section = self.find_section(display_name)
        if section is None or section.is_loading_more or not section.has_more:
            return
        item = self._section_item(display_name)
        if item is None:
            logger.warning(f"No configured section for '{display_name}'")
            return

        section.is_loading_more = True
        try:
            next_page = section.current_page + 1
            recipes = await self.fetch_recipes_for_section(item, page=next_page, limit=SECTION_PAGE_SIZE)
        except Exception as e:
            logger.warning(f"Failed to load more recipes for '{display_name}': {e}")
            return
        finally:
            section.is_loading_more = False

        if len(recipes) < SECTION_PAGE_SIZE:
            section.has_more = False
        section.recipes.extend(merge_new_by_id(section.recipes, recipes))
        section.current_page = next_page

    async def refresh(self) -> None:
        """Reset filters and search, then reload every section."""
        self.search_results = []
        self.current_filter_title = None
        self.selected_dish_type = None
        self.error_message = None
        await self.load_initial_data()

    # =========================================================================
    # Search
    # =========================================================================

    async def search(self, query: str) -> None:
        """
        Search titles: curated matches instantly, then the server.

        Server results come from a prefix pass and, when it finds fewer than
        10, a contains pass. A count-only query runs alongside for paging.
        """
        if not query:
            self.clear_search_results()
            return

        self.current_search_query = query
        self.search_offset = 0
        self.is_loading = True
        self.error_message = None
        self.total_results_count = 0

        local_results = self.curated.search(query, limit=LOCAL_SEARCH_LIMIT)
        if local_results:
            self.search_results = local_results
            self.is_loading = False

        count_task = asyncio.ensure_future(self.queries.count_titles(query))
        try:
            server_results = await self.queries.search_titles(
                query, 0, self.page_size - 1, prefix=True
            )
            if len(server_results) < CONTAINS_PASS_THRESHOLD:
                contains_results = await self.queries.search_titles(query, 0, self.page_size - 1)
                server_results += merge_unique(server_results, contains_results)
        except Exception as e:
            count_task.cancel()
            logger.warning(f"Search failed for '{query}', trying simpler query: {e}")
            await self._search_simple(query)
            return

        merged = rank_recipes(local_results + merge_unique(local_results, server_results))
        count = await count_task

        self.search_results = merged[: self.page_size]
        self.search_offset = len(self.search_results)
        self.total_results_count = count
        self.search_has_more = count > len(self.search_results)
        self.current_filter_title = None
        self.is_loading = False
        logger.info(
            f"Search '{query}': {len(self.search_results)} results "
            f"(local: {len(local_results)}, server: {len(server_results)}, total: {count})"
        )

    async def _search_simple(self, query: str) -> None:
        """Prefix-only search with a smaller result set."""
        try:
            recipes = await self.queries.search_titles_simple(query, limit=SIMPLE_SEARCH_LIMIT)
        except Exception as e:
            logger.error(f"Simple search also failed for '{query}': {e}")
            self.error_message = SEARCH_FAILED_MESSAGE
            self.search_results = []
            self.search_has_more = False
            self.is_loading = False
            return

        self.search_results = recipes
        self.search_offset = len(recipes)
        self.search_has_more = len(recipes) >= SIMPLE_SEARCH_LIMIT
        self.is_loading = False

    async def load_more_search_results(self) -> None:
        """Append the next page of the current search."""
        if not self.current_search_query or not self.search_has_more or self.is_loading_more:
            return

        self.is_loading_more = True
        start = self.search_offset
        try:
            recipes = await self.queries.search_titles(
                self.current_search_query, start, start + self.page_size - 1
            )
        except Exception as e:
            logger.warning(f"Load more search results failed: {e}")
            return
        finally:
            self.is_loading_more = False

        self.search_results.extend(merge_unique(self.search_results, recipes))
        # Offset follows the server's rows, not the deduplicated ones
        self.search_offset += len(recipes)
        self.search_has_more = bool(recipes) and len(self.search_results) < self.total_results_count

    def clear_search_results(self) -> None:
        self.search_results = []
        self.autocomplete_suggestions = []
        self.current_filter_title = None
        self.selected_dish_type = None
        self.error_message = None
        self.current_search_query = ""
        self.search_offset = 0
        self.search_has_more = False
        self.total_results_count = 0

    # =========================================================================
    # Autocomplete
    # =========================================================================

    def fetch_autocomplete_suggestions(self, query: str) -> asyncio.Task:
        """
        Schedule a debounced suggestion fetch, cancelling any pending one.

        Must be called from a running event loop. The returned task may be
        awaited; it is cancelled if another keystroke arrives first.
        """
        if self._autocomplete_task is not None and not self._autocomplete_task.done():
            self._autocomplete_task.cancel()
        self._autocomplete_task = asyncio.ensure_future(self._debounced_suggestions(query))
        return self._autocomplete_task

    async def _debounced_suggestions(self, query: str) -> None:
        await asyncio.sleep(self.autocomplete_delay)

        if not query:
            self.autocomplete_suggestions = []
            return

        try:
            self.autocomplete_suggestions = await self.suggest_titles(query)
        except Exception as e:
            logger.warning(f"Autocomplete failed for '{query}': {e}")

    async def suggest_titles(self, query: str) -> list[str]:
        """Unique titles: prefix matches first, contains matches if few."""
        suggestions: list[str] = []

        def add(titles: list[str]) -> None:
            for title in titles:
                if len(suggestions) >= AUTOCOMPLETE_MAX_SUGGESTIONS:
                    break
                if title not in suggestions:
                    suggestions.append(title)

        add(await self.queries.title_suggestions(query, prefix=True, limit=AUTOCOMPLETE_FETCH_LIMIT))
        if len(suggestions) < AUTOCOMPLETE_CONTAINS_THRESHOLD:
            add(await self.queries.title_suggestions(query, prefix=False, limit=AUTOCOMPLETE_FETCH_LIMIT))
        return suggestions

    # =========================================================================
    # Category filter
    # =========================================================================

    async def toggle_dish_type_filter(self, dish_type: str, display_name: str) -> None:
        """
        Apply a category filter; selecting the active filter again clears it.

        A different filter replaces the active one.
        """
        if self.selected_dish_type == dish_type:
            self.clear_filter()
            return

        self.selected_dish_type = dish_type
        await self._load_recipes_by_dish_type(dish_type, display_name)

    def clear_filter(self) -> None:
        self.search_results = []
        self.current_filter_title = None
        self.selected_dish_type = None
        self.category_has_more = False
        self.category_offset = 0
        self.total_results_count = 0
        self.error_message = None

    async def fetch_recipes_by_dish_type(
        self,
        dish_type: str,
        start: int = 0,
        limit: int = 30,
    ) -> list[CatalogRecipe]:
        """Ranked category page; rating-only smaller page if ranking fails."""
        try:
            return await self.queries.fetch_by_tag("categories", dish_type, start, start + limit - 1)
        except Exception as e:
            logger.warning(f"Ranked category query failed for '{dish_type}', trying fallback: {e}")
            fallback_limit = min(limit, CATEGORY_FALLBACK_PAGE_SIZE)
            return await self.queries.fetch_by_tag_simple(
                "categories", dish_type, start, start + fallback_limit - 1
            )

    async def _load_recipes_by_dish_type(self, dish_type: str, display_name: str) -> None:
        self.is_loading = True
        self.error_message = None
        self.category_offset = 0
        self.total_results_count = 0

        try:
            recipes, count = await asyncio.gather(
                self.fetch_recipes_by_dish_type(dish_type, 0, self.page_size),
                self.queries.count_by_tag("categories", dish_type),
            )
        except Exception as e:
            logger.error(f"Failed to load category '{dish_type}': {e}")
            self.error_message = f"Failed to load {display_name}. Please try again."
            self.search_results = []
            self.current_filter_title = None
            self.category_has_more = False
            self.total_results_count = 0
            self.is_loading = False
            return

        self.search_results = recipes
        self.current_filter_title = display_name
        self.category_offset = len(recipes)
        self.total_results_count = count
        self.category_has_more = self._category_has_more(len(recipes))
        self.is_loading = False
        logger.info(f"Category '{dish_type}': {len(recipes)} loaded, {count} total")

    def _category_has_more(self, page_count: int) -> bool:
        if self.total_results_count:
            return page_count > 0 and len(self.search_results) < self.total_results_count
        return page_count >= self.page_size

    async def load_more_category_results(self) -> None:
        """Append the next page of the active category filter."""
        dish_type = self.selected_dish_type
        if dish_type is None or not self.category_has_more or self.is_loading_more:
            return

        self.is_loading_more = True
        try:
            recipes = await self.fetch_recipes_by_dish_type(dish_type, self.category_offset, self.page_size)
        except Exception as e:
            logger.warning(f"Load more category results failed: {e}")
            return
        finally:
            self.is_loading_more = False

        self.search_results.extend(merge_unique(self.search_results, recipes))
        self.category_offset += len(recipes)
        self.category_has_more = self._category_has_more(len(recipes))

    async def load_recipes_for_category(self, category: str) -> None:
        """Replace results with one page of a category (no filter state)."""
        self.is_loading = True
        self.error_message = None
        try:
            self.search_results = await self.fetch_recipes_by_dish_type(category, 0, self.page_size)
        except Exception as e:
            logger.error(f"Failed to load category '{category}': {e}")
            self.error_message = f"Failed to load {category}. Please try again."
        finally:
            self.is_loading = False

    # =========================================================================
    # Other listings
    # =========================================================================

    async def fetch_recipes_by_cuisine(self, cuisine: str, page: int = 0, limit: int = 10) -> list[CatalogRecipe]:
        start = page * limit
        return await self.queries.fetch_by_tag("cuisines", cuisine, start, start + limit - 1)

    async def fetch_top_rated_recipes(self, limit: int = 10) -> list[CatalogRecipe]:
        return await self.queries.fetch_top_rated(limit)

    async def fetch_recipes_by_keyword(self, keyword: str, limit: int = 10) -> list[CatalogRecipe]:
        return await self.queries.search_titles(keyword, 0, limit - 1)

    async def fetch_recipes_by_time(self, max_minutes: int, limit: int = 10) -> list[CatalogRecipe]:
        return await self.queries.fetch_by_max_time(max_minutes, limit)
