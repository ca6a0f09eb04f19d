"""Schema snapshot orchestration.

Usage:
    from pg_snapshot.snapshot import Snapshot, SnapshotGenerator, create_snapshot_generator
"""

from pg_snapshot.snapshot.generator import (
    PUBLIC_SCHEMA,
    SchemaLogInsertError,
    SnapshotGenerator,
    create_snapshot_generator,
    schemalog_exists,
)
from pg_snapshot.snapshot.models import WILDCARD, Snapshot

__all__ = [
    "Snapshot",
    "WILDCARD",
    "PUBLIC_SCHEMA",
    "SnapshotGenerator",
    "SchemaLogInsertError",
    "create_snapshot_generator",
    "schemalog_exists",
]
