"""pg-snapshot: schema-only PostgreSQL snapshots for replication bootstrapping.

Copies the structure of a schema (all of its tables, or a chosen subset)
from a source database into a target database with pg_dump/psql, and
records the snapshot in the source's schemalog.

Usage:
    from pg_snapshot import Snapshot, create_snapshot_generator
    from pg_snapshot import get_snapshot_generator, load_snapshot_config
    from pg_snapshot import PGRestoreErrors, SchemaLogInsertError
"""

__version__ = "0.1.0"

# Queriers
from pg_snapshot.adapters.base import Querier, QuerierBuilder
from pg_snapshot.adapters.postgres import AsyncPostgresQuerier, connect_querier

# Config
from pg_snapshot.config.loader import load_snapshot_config
from pg_snapshot.config.models import DatabaseProfile, SnapshotConfig

# Factory
from pg_snapshot.factory import (
    ProfileNotFoundError,
    get_snapshot_generator,
    resolve_url,
)

# Dump / restore
from pg_snapshot.pgdump import (
    PGDumpError,
    PGDumpOptions,
    PGRestoreError,
    PGRestoreErrors,
    PGRestoreOptions,
    RelationAlreadyExistsError,
    SnapshotError,
    quote_identifier,
)

# Schemalog
from pg_snapshot.schemalog import LogEntry, PostgresSchemaLogStore, SchemaLogStore

# Snapshot
from pg_snapshot.snapshot import (
    SchemaLogInsertError,
    Snapshot,
    SnapshotGenerator,
    create_snapshot_generator,
)

__all__ = [
    # Queriers
    "Querier",
    "QuerierBuilder",
    "AsyncPostgresQuerier",
    "connect_querier",
    # Config
    "load_snapshot_config",
    "DatabaseProfile",
    "SnapshotConfig",
    # Factory
    "get_snapshot_generator",
    "ProfileNotFoundError",
    "resolve_url",
    # Dump / restore
    "PGDumpOptions",
    "PGRestoreOptions",
    "quote_identifier",
    "SnapshotError",
    "PGDumpError",
    "PGRestoreError",
    "PGRestoreErrors",
    "RelationAlreadyExistsError",
    # Schemalog
    "LogEntry",
    "SchemaLogStore",
    "PostgresSchemaLogStore",
    # Snapshot
    "Snapshot",
    "SnapshotGenerator",
    "SchemaLogInsertError",
    "create_snapshot_generator",
]
