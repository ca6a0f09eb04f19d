"""Snapshot request model."""

from pydantic import BaseModel, Field

WILDCARD = "*"


class Snapshot(BaseModel):
    """Request to snapshot tables of one schema.

    ``table_names`` is empty (nothing to do), exactly ``["*"]`` (every table
    in the schema), or an explicit list of tables to include.
    """

    schema_name: str = Field(min_length=1)
    table_names: list[str] = Field(default_factory=list)

    @property
    def is_wildcard(self) -> bool:
        return self.table_names == [WILDCARD]
