"""
Pytest configuration and fixtures for Salt tests.

Backend access is replaced by an in-memory PostgREST-style fake; nothing
here talks to Supabase or the network.
"""

import asyncio
import os
import re
from typing import Any, Callable

import pytest

# Set test environment before importing salt modules
os.environ["SALT_ENV"] = "development"
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# In-memory PostgREST fake
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, data: list[dict] | None = None, count: int | None = None):
        self.data = data if data is not None else []
        self.count = count


def _ilike_regex(pattern: str) -> re.Pattern:
    parts = [re.escape(part) for part in pattern.split("%")]
    return re.compile(".*".join(parts), re.IGNORECASE | re.DOTALL)


def _parse_array_literal(value: str) -> list[str]:
    inner = value.strip()[1:-1]
    return [item.strip().strip('"') for item in inner.split(",") if item.strip()]


def _sort_value(value: Any) -> tuple:
    return (value is not None, value if value is not None else 0)


class FakeQuery:
    """Fluent builder covering the subset of PostgREST the services use."""

    def __init__(self, db: "FakeDatabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.count_mode: str | None = None
        self.head = False
        self.filters: list[tuple[str, str, Any]] = []
        self.orders: list[tuple[str, bool]] = []
        self.start: int | None = None
        self.end: int | None = None
        self.max_rows: int | None = None
        self.payload: Any = None

    # -- builders --

    def select(self, *columns: str, count: str | None = None, head: bool = False) -> "FakeQuery":
        self.columns = ", ".join(columns) or "*"
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict) -> "FakeQuery":
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("eq", column, value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self.filters.append(("ilike", column, pattern))
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("lte", column, value))
        return self

    def filter(self, column: str, operator: str, criteria: str) -> "FakeQuery":
        self.filters.append((operator, column, criteria))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.start, self.end = start, end
        return self

    def limit(self, size: int) -> "FakeQuery":
        self.max_rows = size
        return self

    # -- evaluation --

    def _matches(self, row: dict) -> bool:
        for operator, column, value in self.filters:
            field = row.get(column)
            if operator == "eq" and str(field) != str(value):
                return False
            if operator == "ilike" and not (
                isinstance(field, str) and _ilike_regex(value).fullmatch(field)
            ):
                return False
            if operator == "lte" and (field is None or field > value):
                return False
            if operator == "cs" and not set(_parse_array_literal(value)) <= set(field or []):
                return False
        return True

    def _select(self) -> FakeResponse:
        rows = [dict(row) for row in self.db.tables.get(self.table, []) if self._matches(row)]
        for column, desc in reversed(self.orders):
            rows.sort(key=lambda r: _sort_value(r.get(column)), reverse=desc)
        count = len(rows) if self.count_mode == "exact" else None
        if self.head:
            return FakeResponse([], count)
        if self.start is not None:
            rows = rows[self.start : self.end + 1]
        if self.max_rows is not None:
            rows = rows[: self.max_rows]
        return FakeResponse(rows, count)

    async def execute(self) -> FakeResponse:
        self.db.executed.append(self)
        if self.db.delay:
            await asyncio.sleep(self.db.delay)
        if self.db.fail_if is not None and self.db.fail_if(self):
            raise RuntimeError("simulated backend failure")

        table = self.db.tables.setdefault(self.table, [])
        if self.operation == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            table.extend(dict(row) for row in rows)
            return FakeResponse([dict(row) for row in rows])
        if self.operation == "update":
            updated = []
            for row in table:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)
        if self.operation == "delete":
            removed = [row for row in table if self._matches(row)]
            self.db.tables[self.table] = [row for row in table if not self._matches(row)]
            return FakeResponse(removed)
        return self._select()


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    async def upload(self, path: str, file: bytes, file_options: dict | None = None) -> None:
        if self.storage.fail_paths and any(p in path for p in self.storage.fail_paths):
            raise RuntimeError(f"simulated upload failure for {path}")
        self.storage.files[f"{self.name}/{path}"] = file

    async def get_public_url(self, path: str) -> str:
        return f"https://storage.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.fail_paths: list[str] = []

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeDatabase:
    """Stands in for the Supabase client: table() builders plus storage."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables = tables or {}
        self.storage = FakeStorage()
        self.executed: list[FakeQuery] = []
        self.fail_if: Callable[[FakeQuery], bool] | None = None
        self.delay = 0.0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def make_recipe_row(
    id: str,
    title: str,
    *,
    cuisines: list[str] | None = None,
    categories: list[str] | None = None,
    rating: float = 4.0,
    rating_count: int = 10,
    is_curated: bool = False,
    total_time_minutes: int | None = None,
) -> dict:
    return {
        "id": id,
        "title": title,
        "cuisines": cuisines or [],
        "categories": categories or [],
        "rating": rating,
        "rating_count": rating_count,
        "total_rating": rating * rating_count,
        "is_curated": is_curated,
        "total_time_minutes": total_time_minutes,
        "ingredients": [],
        "instructions": [],
    }


@pytest.fixture
def recipe_row() -> Callable[..., dict]:
    return make_recipe_row


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def catalog_db() -> FakeDatabase:
    """Remote recipes table with a few cuisines and categories."""
    rows = [
        make_recipe_row("r1", "Chicken Tikka Masala", cuisines=["Indian"], categories=["Main Dishes"], rating=4.8, rating_count=500),
        make_recipe_row("r2", "Chicken Parmesan", cuisines=["Italian"], categories=["Main Dishes"], rating=4.7, rating_count=900),
        make_recipe_row("r3", "Lemon Chicken Soup", cuisines=["Greek"], categories=["Soups"], rating=4.5, rating_count=120),
        make_recipe_row("r4", "Shrimp Scampi", cuisines=["Italian"], categories=["Seafood"], rating=4.6, rating_count=300),
        make_recipe_row("r5", "Tuna Poke Bowl", cuisines=["Japanese"], categories=["Seafood"], rating=4.2, rating_count=80, total_time_minutes=15),
        make_recipe_row("r6", "Beef Tacos", cuisines=["Mexican"], categories=["Main Dishes"], rating=4.4, rating_count=700, total_time_minutes=25),
        make_recipe_row("r7", "Brownies", cuisines=["American"], categories=["Desserts"], rating=4.9, rating_count=1500, is_curated=True, total_time_minutes=45),
        make_recipe_row("r8", "Lemon Bars", cuisines=["American"], categories=["Desserts"], rating=4.3, rating_count=200, total_time_minutes=60),
    ]
    return FakeDatabase({"recipes": rows})


@pytest.fixture
def curated_path(tmp_path):
    """Small curated dataset with string ratings, as the bundled file has."""
    import json

    rows = [
        {"id": "c1", "title": "Chicken Enchiladas", "cuisines": ["Mexican"], "categories": ["Main Dishes"],
         "rating": "4.7", "rating_count": 100, "total_rating": "470", "is_curated": True},
        {"id": "c2", "title": "Fish Tacos", "cuisines": ["Mexican"], "categories": ["Seafood"],
         "rating": "4.5", "rating_count": 60, "total_rating": "270", "is_curated": True},
        {"id": "c3", "title": "Garlic Shrimp", "cuisines": ["American"], "categories": ["Seafood"],
         "rating": "4.9", "rating_count": 200, "is_curated": True},
        {"id": "c4", "title": "Roast Chicken", "cuisines": ["French"], "categories": ["Main Dishes"],
         "rating": "not rated", "rating_count": 0, "is_curated": True},
    ]
    path = tmp_path / "curated.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path
