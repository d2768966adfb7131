"""Tests for the explore engine: sections, search, autocomplete, filters."""

import asyncio

import pytest

from salt.catalog import CatalogQueries, CuratedRecipeCatalog, ExploreService, SectionItem
from salt.catalog.explore import SEARCH_FAILED_MESSAGE
from salt.catalog.models import CuisineSection

SECTIONS = [
    SectionItem("Seafood", "Seafood", is_cuisine=False),
    SectionItem("Mexican", "Mexican", is_cuisine=True),
    SectionItem("Desserts", "Dessert", is_cuisine=False),
    SectionItem("Italian", "Italian", is_cuisine=True),
]


def _run(coro):
    return asyncio.run(coro)


def _ids(recipes):
    return [r.id for r in recipes]


@pytest.fixture
def empty_curated(tmp_path):
    return CuratedRecipeCatalog(tmp_path / "missing.json").load()


def _explore(db, curated, **kwargs) -> ExploreService:
    kwargs.setdefault("sections", SECTIONS)
    kwargs.setdefault("autocomplete_delay", 0.01)
    return ExploreService(CatalogQueries(db, timeout=1.0), curated, **kwargs)


class TestSections:
    def test_local_first_then_remote_merge(self, catalog_db, curated_path):
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())

        _run(explore.load_initial_data())

        assert [s.cuisine for s in explore.sections] == ["Seafood", "Mexican", "Dessert", "Italian"]
        by_name = {s.cuisine: s for s in explore.sections}
        # Curated recipes keep their positions; server recipes are appended
        assert _ids(by_name["Seafood"].recipes) == ["c3", "c2", "r4", "r5"]
        assert _ids(by_name["Mexican"].recipes) == ["c1", "c2", "r6"]
        assert _ids(by_name["Dessert"].recipes) == ["r7", "r8"]
        assert not by_name["Dessert"].has_more
        assert by_name["Dessert"].key == "Desserts"
        assert not explore.is_loading

    def test_repeated_augmentation_adds_no_duplicates(self, catalog_db, curated_path):
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())
        _run(explore.load_initial_data())
        before = {s.cuisine: _ids(s.recipes) for s in explore.sections}

        _run(explore.fetch_additional_recipes(explore.section_items))

        after = {s.cuisine: _ids(s.recipes) for s in explore.sections}
        assert after == before
        for ids in after.values():
            assert len(ids) == len(set(ids))

    def test_failed_section_keeps_local_results(self, catalog_db, curated_path):
        catalog_db.fail_if = lambda q: any(value == '{"Mexican"}' for _, _, value in q.filters)
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())

        _run(explore.load_initial_data())

        mexican = explore.find_section("Mexican")
        assert _ids(mexican.recipes) == ["c1", "c2"]
        assert _ids(explore.find_section("Seafood").recipes) == ["c3", "c2", "r4", "r5"]
        assert explore.error_message is None

    def test_all_remote_failing_still_shows_curated(self, catalog_db, curated_path):
        catalog_db.fail_if = lambda q: True
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())

        _run(explore.load_initial_data())

        assert [s.cuisine for s in explore.sections] == ["Seafood", "Mexican"]

    def test_lazy_load_and_paging(self, fake_db, recipe_row, empty_curated):
        fake_db.tables["recipes"] = [
            recipe_row(f"t{i:02d}", f"Thai Dish {i}", cuisines=["Thai"], rating=4.9 - i * 0.1)
            for i in range(10)
        ]
        explore = _explore(fake_db, empty_curated, sections=[SectionItem("Thai", "Thai", is_cuisine=True)])
        explore.sections = [CuisineSection(cuisine="Thai", key="Thai", is_cuisine=True)]

        _run(explore.load_initial_recipes("Thai"))
        thai = explore.find_section("Thai")
        assert _ids(thai.recipes) == [f"t{i:02d}" for i in range(6)]
        assert thai.is_loaded and thai.has_more

        _run(explore.load_more_recipes("Thai"))
        assert _ids(thai.recipes) == [f"t{i:02d}" for i in range(10)]
        assert thai.current_page == 1
        assert not thai.has_more
        assert not thai.is_loading_more

        executed = len(fake_db.executed)
        _run(explore.load_more_recipes("Thai"))
        assert len(fake_db.executed) == executed

    def test_refresh_clears_filters(self, catalog_db, curated_path):
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())
        _run(explore.toggle_dish_type_filter("Desserts", "Dessert"))

        _run(explore.refresh())

        assert explore.selected_dish_type is None
        assert explore.current_filter_title is None
        assert explore.search_results == []
        assert explore.sections


class TestSearch:
    def test_local_then_server_ranked(self, catalog_db, curated_path):
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())

        _run(explore.search("chicken"))

        # Curated first, then server results by total rating
        assert _ids(explore.search_results) == ["c1", "c4", "r2", "r1", "r3"]
        assert explore.total_results_count == 3
        assert not explore.search_has_more
        assert explore.search_offset == 5
        assert not explore.is_loading

    def test_title_duplicates_of_local_results_dropped(self, catalog_db, curated_path, recipe_row):
        catalog_db.tables["recipes"].append(recipe_row("dup", "Fish Tacos", categories=["Seafood"]))
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())

        _run(explore.search("fish"))

        assert _ids(explore.search_results) == ["c2"]

    def test_load_more(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated, page_size=2)

        _run(explore.search("chicken"))
        assert _ids(explore.search_results) == ["r2", "r1"]
        assert explore.search_has_more

        _run(explore.load_more_search_results())
        assert _ids(explore.search_results) == ["r2", "r1", "r3"]
        assert explore.search_offset == 3
        assert not explore.search_has_more

    def test_falls_back_to_simple_search(self, catalog_db, empty_curated):
        # Ranged queries fail; the limited prefix query works
        catalog_db.fail_if = lambda q: q.start is not None
        explore = _explore(catalog_db, empty_curated)

        _run(explore.search("chicken"))

        assert _ids(explore.search_results) == ["r2", "r1"]
        assert not explore.search_has_more
        assert explore.error_message is None

    def test_total_failure_sets_message(self, catalog_db, curated_path):
        catalog_db.fail_if = lambda q: True
        explore = _explore(catalog_db, CuratedRecipeCatalog(curated_path).load())

        _run(explore.search("chicken"))

        assert explore.error_message == SEARCH_FAILED_MESSAGE
        assert explore.search_results == []
        assert not explore.is_loading

    def test_empty_query_clears(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)
        _run(explore.search("chicken"))

        _run(explore.search(""))

        assert explore.search_results == []
        assert explore.current_search_query == ""
        assert explore.total_results_count == 0


class TestAutocomplete:
    def test_prefix_then_contains(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)
        assert _run(explore.suggest_titles("chicken")) == [
            "Chicken Tikka Masala",
            "Chicken Parmesan",
            "Lemon Chicken Soup",
        ]

    def test_capped_at_eight_unique(self, fake_db, recipe_row, empty_curated):
        fake_db.tables["recipes"] = [
            recipe_row(f"p{i}", f"Pie {i % 10}") for i in range(20)
        ]
        explore = _explore(fake_db, empty_curated)

        suggestions = _run(explore.suggest_titles("pie"))

        assert len(suggestions) == 8
        assert len(set(suggestions)) == 8

    def test_newer_keystroke_cancels_pending_fetch(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)

        async def scenario():
            first = explore.fetch_autocomplete_suggestions("chi")
            second = explore.fetch_autocomplete_suggestions("chicken")
            await second
            return first

        first = _run(scenario())

        assert first.cancelled()
        patterns = {value for q in catalog_db.executed for op, _, value in q.filters if op == "ilike"}
        assert patterns == {"chicken%", "%chicken%"}
        assert explore.autocomplete_suggestions[0] == "Chicken Tikka Masala"

    def test_empty_query_clears_suggestions(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)
        explore.autocomplete_suggestions = ["stale"]

        async def scenario():
            await explore.fetch_autocomplete_suggestions("")

        _run(scenario())
        assert explore.autocomplete_suggestions == []


class TestCategoryFilter:
    def test_toggle_on_and_off(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)

        _run(explore.toggle_dish_type_filter("Desserts", "Dessert"))
        assert _ids(explore.search_results) == ["r7", "r8"]
        assert explore.current_filter_title == "Dessert"
        assert explore.total_results_count == 2
        assert not explore.category_has_more

        _run(explore.toggle_dish_type_filter("Desserts", "Dessert"))
        assert explore.selected_dish_type is None
        assert explore.search_results == []
        assert explore.current_filter_title is None

    def test_switching_filters_replaces(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)
        _run(explore.toggle_dish_type_filter("Desserts", "Dessert"))

        _run(explore.toggle_dish_type_filter("Seafood", "Seafood"))

        assert explore.selected_dish_type == "Seafood"
        assert _ids(explore.search_results) == ["r4", "r5"]

    def test_paging(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated, page_size=1)

        _run(explore.toggle_dish_type_filter("Desserts", "Dessert"))
        assert _ids(explore.search_results) == ["r7"]
        assert explore.category_has_more

        _run(explore.load_more_category_results())
        assert _ids(explore.search_results) == ["r7", "r8"]
        assert explore.category_offset == 2
        assert not explore.category_has_more

    def test_ranked_failure_falls_back(self, catalog_db, empty_curated):
        catalog_db.fail_if = lambda q: len(q.orders) > 1
        explore = _explore(catalog_db, empty_curated)

        _run(explore.toggle_dish_type_filter("Seafood", "Seafood"))

        assert _ids(explore.search_results) == ["r4", "r5"]
        assert explore.error_message is None

    def test_total_failure_sets_message(self, catalog_db, empty_curated):
        catalog_db.fail_if = lambda q: q.count_mode is None
        explore = _explore(catalog_db, empty_curated)

        _run(explore.toggle_dish_type_filter("Seafood", "Seafood"))

        assert explore.search_results == []
        assert explore.error_message == "Failed to load Seafood. Please try again."
        assert not explore.is_loading


class TestListings:
    def test_pass_through_queries(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)

        assert _ids(_run(explore.fetch_top_rated_recipes(limit=1))) == ["r7"]
        assert _ids(_run(explore.fetch_recipes_by_time(30))) == ["r5", "r6"]
        assert _ids(_run(explore.fetch_recipes_by_cuisine("Italian"))) == ["r2", "r4"]
        assert _ids(_run(explore.fetch_recipes_by_keyword("lemon"))) == ["r8", "r3"]

    def test_load_recipes_for_category(self, catalog_db, empty_curated):
        explore = _explore(catalog_db, empty_curated)
        _run(explore.load_recipes_for_category("Desserts"))
        assert _ids(explore.search_results) == ["r7", "r8"]
        assert explore.current_filter_title is None
