"""Pydantic models for snapshot configuration."""

from pydantic import BaseModel, Field


class DatabaseProfile(BaseModel):
    """Database connection profile from snapshot.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution


class SnapshotConfig(BaseModel):
    """Complete snapshot configuration from snapshot.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    source: str | None = None       # profile to snapshot from
    target: str | None = None       # profile to restore into
