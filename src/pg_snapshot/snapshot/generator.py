"""Schema snapshot generator.

Copies the structure of a schema (optionally restricted to some of its
tables) from a source database to a target database with pg_dump and
psql/pg_restore, then records the snapshot in the source's schemalog so
the replication pipeline knows where its state starts.

A snapshot runs as a fixed sequence of steps, each gating the next:

1. no-op check -- an empty table list returns without any I/O
2. exclusion resolution -- source tables not requested are excluded
3. dump of the source schema (structure only)
4. ``CREATE SCHEMA IF NOT EXISTS`` on the target (skipped for ``public``)
5. restore of the dump on the target, ignoring "already exists" errors
6. schemalog insert (when the schemalog table exists)

Usage:
    from pg_snapshot.snapshot import Snapshot, create_snapshot_generator

    generator = await create_snapshot_generator(source_url, target_url)
    try:
        await generator.create_snapshot(
            Snapshot(schema_name="inventory", table_names=["items", "stock"])
        )
    finally:
        await generator.close()
"""

import logging
from collections.abc import Awaitable, Callable

from pg_snapshot.adapters.base import QuerierBuilder
from pg_snapshot.adapters.postgres import connect_querier, libpq_url
from pg_snapshot.pgdump.errors import PGRestoreErrors, SnapshotError
from pg_snapshot.pgdump.identifiers import quote_identifier
from pg_snapshot.pgdump.models import PGDumpOptions, PGRestoreOptions
from pg_snapshot.pgdump.runner import run_pg_dump, run_pg_restore
from pg_snapshot.schemalog.models import SCHEMA_NAME, TABLE_NAME
from pg_snapshot.schemalog.store import PostgresSchemaLogStore, SchemaLogStore
from pg_snapshot.snapshot.models import Snapshot

logger = logging.getLogger(__name__)

PUBLIC_SCHEMA = "public"
DUMP_FORMAT = "p"

PGDumpFn = Callable[[PGDumpOptions], Awaitable[bytes]]
PGRestoreFn = Callable[[PGRestoreOptions, bytes], Awaitable[str]]

EXISTS_QUERY = (
    "SELECT EXISTS (SELECT FROM information_schema.tables "
    "WHERE table_schema = :table_schema AND table_name = :table_name)"
)


class SchemaLogInsertError(SnapshotError):
    """The schema was copied but its schemalog entry could not be written."""


async def schemalog_exists(
    source_url: str, querier_builder: QuerierBuilder = connect_querier
) -> bool:
    """Check whether the schemalog table exists in the database at ``source_url``.

    Needs no target database, so callers that only inspect a source can
    use it without building a generator.
    """
    conn = await querier_builder(source_url)
    try:
        row = await conn.query_row(
            EXISTS_QUERY, {"table_schema": SCHEMA_NAME, "table_name": TABLE_NAME}
        )
    finally:
        await conn.close()
    return bool(row[0]) if row else False


class SnapshotGenerator:
    """Schema-only snapshot orchestrator.

    Holds no state between snapshots apart from the optional schemalog
    store, so concurrent ``create_snapshot`` calls for different schemas
    are safe.

    Args:
        source_url: Connection string of the database to snapshot.
        target_url: Connection string of the database to restore into.
        querier_builder: Opens queriers for both databases.
        pg_dump_fn: Dump executor.
        pg_restore_fn: Restore executor.
        schemalog_store: Store receiving one entry per snapshot.  When
            ``None`` the bookkeeping step is skipped.
    """

    def __init__(
        self,
        source_url: str,
        target_url: str,
        querier_builder: QuerierBuilder = connect_querier,
        pg_dump_fn: PGDumpFn = run_pg_dump,
        pg_restore_fn: PGRestoreFn = run_pg_restore,
        schemalog_store: SchemaLogStore | None = None,
    ) -> None:
        self.source_url = source_url
        self.target_url = target_url
        self._querier_builder = querier_builder
        self._pg_dump_fn = pg_dump_fn
        self._pg_restore_fn = pg_restore_fn
        self.schemalog_store = schemalog_store
        self._closed = False

    async def create_snapshot(self, snapshot: Snapshot) -> None:
        """Copy the structure of ``snapshot.schema_name`` to the target.

        Raises:
            Exception: The first failing step's error, unmodified, except
                for restore errors (only fatal sub-errors are kept) and
                schemalog failures (wrapped in ``SchemaLogInsertError``).
        """
        if not snapshot.table_names:
            logger.debug(
                "no tables requested for schema %s, nothing to snapshot",
                snapshot.schema_name,
            )
            return

        excluded_tables: list[str] = []
        if not snapshot.is_wildcard:
            excluded_tables = await self._excluded_tables(
                snapshot.schema_name, snapshot.table_names
            )
            logger.debug(
                "excluding %d tables from schema %s", len(excluded_tables), snapshot.schema_name
            )

        dump = await self._pg_dump_fn(self._dump_options(snapshot.schema_name, excluded_tables))
        logger.debug("dumped schema %s (%d bytes)", snapshot.schema_name, len(dump))

        if snapshot.schema_name != PUBLIC_SCHEMA:
            await self._create_schema(snapshot.schema_name)

        await self._restore(dump)

        if self.schemalog_store is not None:
            try:
                await self.schemalog_store.insert(snapshot.schema_name)
            except Exception as e:
                raise SchemaLogInsertError(
                    f"inserting schemalog entry after schema snapshot: {e}"
                ) from e

        logger.info(
            "schema snapshot created for %s (%s)",
            snapshot.schema_name,
            ", ".join(snapshot.table_names),
        )

    async def schemalog_exists(self) -> bool:
        """Check whether the schemalog table exists in the source database."""
        return await schemalog_exists(self.source_url, self._querier_builder)

    async def close(self) -> None:
        """Release the schemalog store.  Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self.schemalog_store is not None:
            await self.schemalog_store.close()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _excluded_tables(self, schema_name: str, table_names: list[str]) -> list[str]:
        """Source tables of ``schema_name`` that were not requested."""
        params: dict[str, str] = {"schema_name": schema_name}
        placeholders: list[str] = []
        for i, table in enumerate(table_names):
            param_name = f"table_{i}"
            placeholders.append(f":{param_name}")
            params[param_name] = table

        query = (
            "SELECT tablename FROM pg_tables WHERE schemaname = :schema_name "
            f"AND tablename NOT IN ({', '.join(placeholders)})"
        )

        conn = await self._querier_builder(self.source_url)
        try:
            return [row[0] async for row in conn.query(query, params)]
        finally:
            await conn.close()

    def _dump_options(self, schema_name: str, excluded_tables: list[str]) -> PGDumpOptions:
        return PGDumpOptions(
            connection_string=libpq_url(self.source_url),
            format=DUMP_FORMAT,
            clean=False,
            schema_only=True,
            schemas=[quote_identifier(schema_name)],
            exclude_tables=[quote_identifier(t) for t in excluded_tables],
        )

    def _restore_options(self) -> PGRestoreOptions:
        return PGRestoreOptions(
            connection_string=libpq_url(self.target_url),
            schema_only=True,
            format=DUMP_FORMAT,
        )

    async def _create_schema(self, schema_name: str) -> None:
        conn = await self._querier_builder(self.target_url)
        try:
            await conn.execute(f"CREATE SCHEMA IF NOT EXISTS {quote_identifier(schema_name)}")
        finally:
            await conn.close()

    async def _restore(self, dump: bytes) -> None:
        try:
            await self._pg_restore_fn(self._restore_options(), dump)
        except PGRestoreErrors as e:
            critical = e.critical_errors()
            if critical:
                raise PGRestoreErrors(*critical) from e
            ignored = e.ignored_errors()
            logger.warning(
                "restore: %d errors ignored: %s",
                len(ignored),
                "; ".join(str(err) for err in ignored),
            )


async def create_snapshot_generator(
    source_url: str,
    target_url: str,
    querier_builder: QuerierBuilder = connect_querier,
    pg_dump_fn: PGDumpFn = run_pg_dump,
    pg_restore_fn: PGRestoreFn = run_pg_restore,
    schemalog_store: SchemaLogStore | None = None,
) -> SnapshotGenerator:
    """Build a ``SnapshotGenerator``, wiring in the schemalog store.

    When no store is given and the source has a schemalog table, a
    ``PostgresSchemaLogStore`` on the source is opened.  Without the table
    snapshots are not recorded.

    Raises:
        Exception: If the schemalog existence check fails.
    """
    generator = SnapshotGenerator(
        source_url,
        target_url,
        querier_builder=querier_builder,
        pg_dump_fn=pg_dump_fn,
        pg_restore_fn=pg_restore_fn,
        schemalog_store=schemalog_store,
    )
    if generator.schemalog_store is None:
        if await generator.schemalog_exists():
            generator.schemalog_store = await PostgresSchemaLogStore.create(
                source_url, querier_builder
            )
        else:
            logger.info(
                "schemalog table %s.%s not found, snapshots will not be recorded",
                SCHEMA_NAME,
                TABLE_NAME,
            )
    return generator
