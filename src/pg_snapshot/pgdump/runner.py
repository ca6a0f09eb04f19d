"""pg_dump / restore executors.

Runs the PostgreSQL client binaries as asyncio subprocesses.  The binaries
must be on ``PATH``.

Usage:
    from pg_snapshot.pgdump.runner import run_pg_dump, run_pg_restore

    dump = await run_pg_dump(PGDumpOptions(connection_string=src, schema_only=True))
    output = await run_pg_restore(PGRestoreOptions(connection_string=dst), dump)
"""

import asyncio
import logging

from pg_snapshot.pgdump.errors import (
    PGDumpError,
    PGRestoreError,
    PGRestoreErrors,
    parse_restore_output,
)
from pg_snapshot.pgdump.models import PGDumpOptions, PGRestoreOptions

logger = logging.getLogger(__name__)


async def _run(cmd: list[str], stdin: bytes | None = None) -> tuple[int, bytes, bytes]:
    """Run a command, returning ``(returncode, stdout, stderr)``."""
    logger.debug("running %s", cmd[0])
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate(stdin)
    return proc.returncode, stdout, stderr


async def run_pg_dump(opts: PGDumpOptions) -> bytes:
    """Run ``pg_dump`` and return the dump.

    Args:
        opts: Dump options.

    Returns:
        The dump as produced on stdout.

    Raises:
        PGDumpError: If pg_dump is missing or exits non-zero.
    """
    try:
        returncode, stdout, stderr = await _run(["pg_dump", *opts.to_args()])
    except FileNotFoundError as e:
        raise PGDumpError("pg_dump not found on PATH") from e

    if returncode != 0:
        message = stderr.decode(errors="replace").strip()
        raise PGDumpError(f"pg_dump failed: {message}", stderr=message)
    return stdout


async def run_pg_restore(opts: PGRestoreOptions, dump: bytes) -> str:
    """Apply a dump to the destination database.

    Plain-format dumps are SQL scripts and go through ``psql``; archive
    formats go through ``pg_restore``.  psql keeps going after a failing
    statement, so its output is scanned for errors whatever the exit code.

    Args:
        opts: Restore options.
        dump: Dump bytes, fed on stdin.

    Returns:
        Combined stdout/stderr of the run.

    Raises:
        PGRestoreErrors: If the output reports errors (each classified).
        PGRestoreError: If the binary is missing, or it exits non-zero
            without reporting a recognisable error.
    """
    if opts.is_plain:
        cmd = ["psql", *opts.to_psql_args()]
    else:
        cmd = ["pg_restore", *opts.to_args()]

    try:
        returncode, stdout, stderr = await _run(cmd, stdin=dump)
    except FileNotFoundError as e:
        raise PGRestoreError(f"{cmd[0]} not found on PATH") from e

    output = (stdout + stderr).decode(errors="replace")
    errors = parse_restore_output(output)
    if errors:
        raise PGRestoreErrors(*errors)
    if returncode != 0:
        raise PGRestoreError(f"{cmd[0]} exited with status {returncode}: {output.strip()}")
    return output
