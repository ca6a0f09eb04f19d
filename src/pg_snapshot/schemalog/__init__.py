"""Schemalog bookkeeping: entry model and store.

Usage:
    from pg_snapshot.schemalog import LogEntry, SchemaLogStore, PostgresSchemaLogStore
"""

from pg_snapshot.schemalog.models import SCHEMA_NAME, TABLE_NAME, LogEntry
from pg_snapshot.schemalog.store import PostgresSchemaLogStore, SchemaLogStore

__all__ = [
    "SCHEMA_NAME",
    "TABLE_NAME",
    "LogEntry",
    "SchemaLogStore",
    "PostgresSchemaLogStore",
]
