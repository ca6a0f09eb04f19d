"""Snapshot error taxonomy and restore-error classification.

Restore runs report a composite error, ``PGRestoreErrors``, holding one
sub-error per failing statement.  Each sub-error is tagged by the pure
function ``classify_restore_error``:

- ``RelationAlreadyExistsError`` is ``IGNORABLE`` -- expected when a schema
  is snapshotted again into an already provisioned destination.
- Everything else is ``FATAL``.

Usage:
    from pg_snapshot.pgdump.errors import PGRestoreErrors, RestoreErrorKind

    try:
        await run_pg_restore(opts, dump)
    except PGRestoreErrors as e:
        if e.has_critical_errors():
            raise PGRestoreErrors(*e.critical_errors()) from e
"""

from enum import Enum


class SnapshotError(Exception):
    """Base class for snapshot errors."""


class PGDumpError(SnapshotError):
    """Raised when pg_dump cannot be run or exits with an error."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class PGRestoreError(SnapshotError):
    """A single error reported while applying a dump."""


class RelationAlreadyExistsError(PGRestoreError):
    """The restored object already exists in the destination."""


class PGRestoreErrors(SnapshotError):
    """Composite of the errors reported by one restore run."""

    def __init__(self, *errors: Exception) -> None:
        self.errors: list[Exception] = list(errors)
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.errors:
            return "restore failed with no reported errors"
        return "; ".join(str(e) for e in self.errors)

    def ignored_errors(self) -> list[Exception]:
        """Sub-errors safe to ignore on an idempotent re-run."""
        return [
            e for e in self.errors
            if classify_restore_error(e) is RestoreErrorKind.IGNORABLE
        ]

    def critical_errors(self) -> list[Exception]:
        """Sub-errors that must fail the snapshot."""
        return [
            e for e in self.errors
            if classify_restore_error(e) is RestoreErrorKind.FATAL
        ]

    def has_critical_errors(self) -> bool:
        return any(
            classify_restore_error(e) is RestoreErrorKind.FATAL for e in self.errors
        )


class RestoreErrorKind(Enum):
    """Classification of a restore sub-error."""

    IGNORABLE = "ignorable"
    FATAL = "fatal"


def classify_restore_error(error: Exception) -> RestoreErrorKind:
    """Tag a restore sub-error as ignorable or fatal."""
    if isinstance(error, RelationAlreadyExistsError):
        return RestoreErrorKind.IGNORABLE
    return RestoreErrorKind.FATAL


def parse_restore_output(output: str) -> list[PGRestoreError]:
    """Extract the errors reported in pg_restore / psql output.

    Only lines carrying an ``ERROR:`` or ``error:`` marker count; warnings,
    notices, and ``Command was:`` echo lines are skipped.

    Example:
        >>> errs = parse_restore_output(
        ...     'psql:<stdin>:12: ERROR:  relation "users" already exists'
        ... )
        >>> type(errs[0]).__name__
        'RelationAlreadyExistsError'
    """
    errors: list[PGRestoreError] = []
    for line in output.splitlines():
        line = line.strip()
        if "ERROR:" not in line and "error:" not in line:
            continue
        if "already exists" in line:
            errors.append(RelationAlreadyExistsError(line))
        else:
            errors.append(PGRestoreError(line))
    return errors
