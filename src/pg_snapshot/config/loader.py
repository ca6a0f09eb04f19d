"""TOML configuration loader."""

import tomllib
from pathlib import Path

from pg_snapshot.config.models import DatabaseProfile, SnapshotConfig

DEFAULT_CONFIG_FILE = "snapshot.toml"


def load_snapshot_config(config_path: Path | None = None) -> SnapshotConfig:
    """Load snapshot configuration from TOML file.

    Args:
        config_path: Path to snapshot.toml (default: ``snapshot.toml`` in
            the current working directory)

    Returns:
        SnapshotConfig with all profiles and the source/target selection

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"Snapshot config not found: {config_path}\n"
            f"Create it with [profiles.<name>] tables and a [snapshot] section."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = DatabaseProfile(**profile_data)

    # Parse snapshot settings
    snapshot_settings = data.get("snapshot", {})

    return SnapshotConfig(
        profiles=profiles,
        source=snapshot_settings.get("source"),
        target=snapshot_settings.get("target"),
    )
