"""CLI for schema snapshots.

Usage:
    pg-snapshot snapshot --schema inventory --tables items,stock
    pg-snapshot snapshot --schema inventory --tables '*'
    pg-snapshot --config prod.toml snapshot --schema public --tables users --source prod --target replica
    pg-snapshot check
    pg-snapshot profiles

Commands:
    snapshot  - Copy a schema's structure from source to target
    check     - Report whether the source has a schemalog table
    profiles  - List available profiles
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pg_snapshot.config.loader import load_snapshot_config
from pg_snapshot.factory import ProfileNotFoundError, get_snapshot_generator, get_source_url
from pg_snapshot.schemalog.models import SCHEMA_NAME, TABLE_NAME
from pg_snapshot.snapshot.generator import schemalog_exists
from pg_snapshot.snapshot.models import Snapshot

console = Console()


def _parse_tables(value: str) -> list[str]:
    """Split a comma-separated ``--tables`` value, dropping blanks."""
    return [t.strip() for t in value.split(",") if t.strip()]


def _config_path(args: argparse.Namespace) -> Path | None:
    config = getattr(args, "config", None)
    return Path(config) if config else None


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_snapshot(args: argparse.Namespace) -> int:
    """Async implementation for snapshot command.

    Args:
        args: Parsed arguments with schema, tables, source, target,
            config, and env_prefix.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        snapshot = Snapshot(
            schema_name=args.schema,
            table_names=_parse_tables(args.tables),
        )
    except ValidationError as e:
        console.print(f"[red]Error: invalid snapshot request: {e.errors()[0]['msg']}[/red]")
        return 1

    try:
        generator = await get_snapshot_generator(
            config_path=_config_path(args),
            source=args.source,
            target=args.target,
            env_prefix=args.env_prefix,
        )
    except (FileNotFoundError, ProfileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] Connection failed: {e}")
        return 1

    console.print(
        f"Snapshotting schema [bold cyan]{snapshot.schema_name}[/bold cyan]...",
        style="dim",
    )
    try:
        await generator.create_snapshot(snapshot)
    except Exception as e:
        console.print(f"[bold red]x[/bold red] Snapshot failed: {e}")
        return 1
    finally:
        await generator.close()

    if not snapshot.table_names:
        console.print("[yellow]No tables requested - nothing to do.[/yellow]")
        return 0

    console.print(
        f"[bold green]v[/bold green] Snapshot of "
        f"[bold cyan]{snapshot.schema_name}[/bold cyan] complete"
    )
    if generator.schemalog_store is None:
        console.print("  [dim]Schemalog not found - snapshot not recorded.[/dim]")
    return 0


async def _async_check(args: argparse.Namespace) -> int:
    """Async implementation for check command.

    Reads only the source profile; no target needs to be configured.

    Returns:
        0 if the source could be checked, 1 on failure.
    """
    try:
        source_url = get_source_url(
            config_path=_config_path(args),
            source=args.source,
            env_prefix=args.env_prefix,
        )
    except (FileNotFoundError, ProfileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    try:
        recorded = await schemalog_exists(source_url)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] Connection failed: {e}")
        return 1

    if recorded:
        console.print(
            f"[bold green]v[/bold green] Schemalog [cyan]{SCHEMA_NAME}.{TABLE_NAME}[/cyan] "
            f"found - snapshots will be recorded"
        )
    else:
        console.print(
            f"[yellow]Schemalog {SCHEMA_NAME}.{TABLE_NAME} not found[/yellow] "
            f"- snapshots will not be recorded"
        )
    return 0


# ============================================================================
# Sync command wrappers (cmd_profiles reads local files only)
# ============================================================================


def cmd_snapshot(args: argparse.Namespace) -> int:
    """Run one snapshot.  Wraps the async implementation with ``asyncio.run()``."""
    return asyncio.run(_async_snapshot(args))


def cmd_check(args: argparse.Namespace) -> int:
    """Check for the schemalog table.  Wraps ``asyncio.run()``."""
    return asyncio.run(_async_check(args))


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from snapshot.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if snapshot.toml not found.
    """
    try:
        config = load_snapshot_config(_config_path(args))
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    table = Table(
        title="Database Profiles", show_header=True, header_style="bold"
    )
    table.add_column("Profile")
    table.add_column("Role")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        roles = [role for role in ("source", "target") if getattr(config, role) == name]
        table.add_row(
            f"[bold cyan]{name}[/bold cyan]" if roles else name,
            ", ".join(roles),
            profile.description or "",
        )

    console.print(table)
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="pg-snapshot",
        description="Schema-only PostgreSQL snapshots for replication",
    )
    parser.add_argument(
        "--config",
        help="Path to snapshot.toml (default: ./snapshot.toml)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_SNAPSHOT_SOURCE)"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_profile_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--source", help="Source profile (overrides config)")
        p.add_argument("--target", help="Target profile (overrides config)")

    # snapshot command
    p_snapshot = subparsers.add_parser(
        "snapshot",
        help="Copy a schema's structure from source to target",
    )
    p_snapshot.add_argument(
        "--schema",
        required=True,
        help="Schema to snapshot",
    )
    p_snapshot.add_argument(
        "--tables",
        default="*",
        help="Comma-separated tables to include, or '*' for all (default: *)",
    )
    add_profile_args(p_snapshot)
    p_snapshot.set_defaults(func=cmd_snapshot)

    # check command
    p_check = subparsers.add_parser(
        "check",
        help="Report whether the source has a schemalog table",
    )
    p_check.add_argument("--source", help="Source profile (overrides config)")
    p_check.set_defaults(func=cmd_check)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
