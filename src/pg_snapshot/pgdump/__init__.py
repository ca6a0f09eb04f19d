"""Dump and restore executors, their options, and the restore error taxonomy.

Usage:
    from pg_snapshot.pgdump import PGDumpOptions, PGRestoreOptions
    from pg_snapshot.pgdump import run_pg_dump, run_pg_restore
    from pg_snapshot.pgdump import PGRestoreErrors, quote_identifier
"""

from pg_snapshot.pgdump.errors import (
    PGDumpError,
    PGRestoreError,
    PGRestoreErrors,
    RelationAlreadyExistsError,
    RestoreErrorKind,
    SnapshotError,
    classify_restore_error,
    parse_restore_output,
)
from pg_snapshot.pgdump.identifiers import quote_identifier
from pg_snapshot.pgdump.models import PGDumpOptions, PGRestoreOptions
from pg_snapshot.pgdump.runner import run_pg_dump, run_pg_restore

__all__ = [
    "PGDumpOptions",
    "PGRestoreOptions",
    "run_pg_dump",
    "run_pg_restore",
    "quote_identifier",
    "SnapshotError",
    "PGDumpError",
    "PGRestoreError",
    "PGRestoreErrors",
    "RelationAlreadyExistsError",
    "RestoreErrorKind",
    "classify_restore_error",
    "parse_restore_output",
]
