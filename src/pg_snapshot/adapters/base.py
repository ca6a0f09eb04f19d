"""Querier protocol definition.

Defines the ``Querier`` Protocol that every connection handle must implement,
and the ``QuerierBuilder`` alias for the callables that open them.  All
methods are ``async def`` -- the library is async-first.

Both the source and the target database are reached through the same
builder with different connection strings, so tests can hand the snapshot
generator a fake builder instead of a live database.

Usage:
    from pg_snapshot.adapters.base import Querier, QuerierBuilder

    async def table_names(build: QuerierBuilder, url: str) -> list[str]:
        querier = await build(url)
        try:
            return [
                row[0]
                async for row in querier.query(
                    "SELECT tablename FROM pg_tables WHERE schemaname = :schema_name",
                    {"schema_name": "public"},
                )
            ]
        finally:
            await querier.close()
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Protocol


class Querier(Protocol):
    """Query-capable database handle.

    Parameters are always passed as a dict of named bind values
    (``:name`` placeholders in the SQL text).
    """

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        """Execute a statement that returns no rows (DDL, INSERT without RETURNING).

        Args:
            sql: SQL statement.
            params: Optional dict of named parameters.

        Example:
            await querier.execute("CREATE SCHEMA IF NOT EXISTS audit")
        """
        ...

    def query(
        self, sql: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[tuple]:
        """Stream the rows of a query.

        Errors raised while fetching rows surface from the ``async for``
        loop consuming the iterator, after any rows already yielded.

        Args:
            sql: SQL query.
            params: Optional dict of named parameters.

        Returns:
            Async iterator of row tuples.

        Example:
            async for (name,) in querier.query("SELECT tablename FROM pg_tables"):
                ...
        """
        ...

    async def query_row(
        self, sql: str, params: dict[str, Any] | None = None
    ) -> tuple | None:
        """Run a query and return its first row.

        Args:
            sql: SQL query.
            params: Optional dict of named parameters.

        Returns:
            The first row as a tuple, or ``None`` when the query returns
            no rows.
        """
        ...

    async def close(self) -> None:
        """Release the underlying connection resources."""
        ...


QuerierBuilder = Callable[[str], Awaitable[Querier]]
"""Async callable that opens a ``Querier`` for a connection string."""
