"""Snapshot generator factory.

Resolves the source and target profiles from configuration and builds a
``SnapshotGenerator`` for them.

Profile names are looked up in this order:

1. Explicit argument (``--source`` / ``--target`` on the CLI)
2. ``{prefix}SNAPSHOT_SOURCE`` / ``{prefix}SNAPSHOT_TARGET`` env vars
3. ``[snapshot]`` section of snapshot.toml
"""

import logging
import os
from pathlib import Path
from typing import Literal
from urllib.parse import quote

from pg_snapshot.config.loader import load_snapshot_config
from pg_snapshot.config.models import DatabaseProfile, SnapshotConfig
from pg_snapshot.snapshot.generator import SnapshotGenerator, create_snapshot_generator

logger = logging.getLogger(__name__)

Role = Literal["source", "target"]


class ProfileNotFoundError(Exception):
    """Raised when a database profile is not configured or does not exist."""

    pass


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def get_profile_name(
    role: Role,
    config: SnapshotConfig,
    explicit: str | None = None,
    env_prefix: str = "",
) -> str:
    """Get the profile name selected for ``role``.

    Args:
        role: ``"source"`` or ``"target"``
        config: Loaded configuration
        explicit: Name given by the caller, wins over everything else
        env_prefix: Prefix for the env var lookup (``"APP_"`` reads
            ``APP_SNAPSHOT_SOURCE``)

    Returns:
        Profile name

    Raises:
        ProfileNotFoundError: If no profile is selected for ``role``
    """
    if explicit:
        return explicit

    env_profile = os.environ.get(f"{env_prefix}SNAPSHOT_{role.upper()}")
    if env_profile:
        return env_profile

    configured = getattr(config, role)
    if configured:
        return configured

    raise ProfileNotFoundError(
        f"No {role} profile configured.\n"
        f"Set {env_prefix}SNAPSHOT_{role.upper()}, pass --{role}, "
        f"or add '{role} = \"<name>\"' to the [snapshot] section."
    )


def get_profile_url(config: SnapshotConfig, profile_name: str) -> str:
    """Get the resolved connection URL of a profile.

    Raises:
        ProfileNotFoundError: If the profile is not in the config
    """
    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "none"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found. Available: {available}"
        )
    return resolve_url(config.profiles[profile_name])


def get_source_url(
    config_path: Path | None = None,
    source: str | None = None,
    env_prefix: str = "",
) -> str:
    """Resolve only the source profile's URL.

    For commands that read the source alone; no target profile is needed.

    Raises:
        FileNotFoundError: If the config file does not exist
        ProfileNotFoundError: If the source profile is missing
    """
    config = load_snapshot_config(config_path)
    return get_profile_url(config, get_profile_name("source", config, source, env_prefix))


async def get_snapshot_generator(
    config_path: Path | None = None,
    source: str | None = None,
    target: str | None = None,
    env_prefix: str = "",
) -> SnapshotGenerator:
    """Build a snapshot generator for the configured source and target.

    Args:
        config_path: Path to snapshot.toml (default: ./snapshot.toml)
        source: Source profile name override
        target: Target profile name override
        env_prefix: Prefix for environment variable lookup

    Returns:
        Ready ``SnapshotGenerator``; the caller must ``await close()`` it

    Raises:
        FileNotFoundError: If the config file does not exist
        ProfileNotFoundError: If a profile is missing
    """
    config = load_snapshot_config(config_path)

    source_name = get_profile_name("source", config, source, env_prefix)
    target_name = get_profile_name("target", config, target, env_prefix)
    logger.debug("snapshot from profile %s to profile %s", source_name, target_name)

    return await create_snapshot_generator(
        get_profile_url(config, source_name),
        get_profile_url(config, target_name),
    )
