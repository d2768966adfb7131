"""
Database Adapter Protocol.

Defines the interface the catalog and library services need from the
backend. The Supabase async client satisfies it directly; tests provide
in-memory fakes.

The adapter exposes the Supabase/PostgREST query builder pattern: table()
returns a fluent builder whose execute() is awaitable, and storage exposes
from_(bucket) for object uploads.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DatabaseAdapter(Protocol):
    """
    Abstract backend access for Salt's services.

    The table() method returns a query builder supporting the PostgREST
    fluent API (.select(), .insert(), .update(), .delete(), .eq(),
    .ilike(), .filter(), .lte(), .order(), .range(), .limit()), ending in
    an awaitable .execute() whose result has .data and .count.
    """

    def table(self, name: str) -> Any:
        """Return a query builder for the given table."""
        ...

    @property
    def storage(self) -> Any:
        """
        Return the object storage client.

        storage.from_(bucket) must support awaitable upload() and
        get_public_url().
        """
        ...
