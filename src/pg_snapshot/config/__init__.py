"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from pg_snapshot.config import load_snapshot_config, DatabaseProfile, SnapshotConfig
"""

from pg_snapshot.config.loader import DEFAULT_CONFIG_FILE, load_snapshot_config
from pg_snapshot.config.models import DatabaseProfile, SnapshotConfig

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "load_snapshot_config",
    "SnapshotConfig",
    "DatabaseProfile",
]
