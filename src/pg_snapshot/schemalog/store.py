"""Schemalog store.

Defines the ``SchemaLogStore`` Protocol the snapshot generator writes
through, and ``PostgresSchemaLogStore``, which inserts into the
``pgstream.schema_log`` table of the source database.

Usage:
    from pg_snapshot.schemalog.store import PostgresSchemaLogStore

    store = await PostgresSchemaLogStore.create("postgresql://localhost/src")
    entry = await store.insert("inventory")
    await store.close()
"""

import json
from typing import Protocol

from pg_snapshot.adapters.base import Querier, QuerierBuilder
from pg_snapshot.adapters.postgres import connect_querier
from pg_snapshot.schemalog.models import SCHEMA_NAME, TABLE_NAME, LogEntry


class SchemaLogStore(Protocol):
    """Bookkeeping store for schema snapshots."""

    async def insert(self, schema_name: str) -> LogEntry:
        """Record that a snapshot of ``schema_name`` happened.

        Returns:
            The inserted entry.
        """
        ...

    async def close(self) -> None:
        """Release the store's connection."""
        ...


class PostgresSchemaLogStore:
    """``SchemaLogStore`` backed by the ``pgstream.schema_log`` table.

    Each insert takes the next version number for the schema and captures
    the schema definition with ``pgstream.get_schema()``, installed
    alongside the table by the replication pipeline.

    Args:
        querier: Open querier on the database holding the schemalog.
    """

    _INSERT_QUERY = (
        f"INSERT INTO {SCHEMA_NAME}.{TABLE_NAME} (version, schema_name, schema) "
        f"VALUES ("
        f"COALESCE((SELECT max(version) + 1 FROM {SCHEMA_NAME}.{TABLE_NAME} "
        f"WHERE schema_name = :schema_name), 1), "
        f":schema_name, {SCHEMA_NAME}.get_schema(:schema_name)) "
        f"RETURNING id, version, schema_name, schema, created_at, acked"
    )

    def __init__(self, querier: Querier) -> None:
        self._querier = querier

    @classmethod
    async def create(
        cls,
        database_url: str,
        querier_builder: QuerierBuilder = connect_querier,
    ) -> "PostgresSchemaLogStore":
        """Open a store on ``database_url``."""
        return cls(await querier_builder(database_url))

    async def insert(self, schema_name: str) -> LogEntry:
        """Insert the next schemalog entry for ``schema_name``.

        Raises:
            RuntimeError: If the insert returns no row.
        """
        row = await self._querier.query_row(
            self._INSERT_QUERY, {"schema_name": schema_name}
        )
        if row is None:
            raise RuntimeError(f"schemalog insert for {schema_name!r} returned no row")

        entry_id, version, name, definition, created_at, acked = row
        if isinstance(definition, str):
            definition = json.loads(definition)
        return LogEntry(
            id=str(entry_id),
            version=version,
            schema_name=name,
            definition=definition,
            created_at=created_at,
            acked=acked,
        )

    async def close(self) -> None:
        await self._querier.close()
