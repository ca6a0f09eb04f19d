"""Schemalog entry model and the fixed location of the schemalog table.

The schemalog is an append-only table maintained for the downstream
replication pipeline.  Each entry records a schema's definition at a
point in time; a snapshot writes one to mark where replication state starts.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

SCHEMA_NAME = "pgstream"
TABLE_NAME = "schema_log"


class LogEntry(BaseModel):
    """A row of the schemalog table."""

    id: str
    version: int
    schema_name: str
    definition: Any = None              # schema JSON as stored by the pipeline
    created_at: datetime | None = None
    acked: bool = False
