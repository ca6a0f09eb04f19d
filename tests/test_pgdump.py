"""Tests for the pgdump package: option rendering, identifier quoting,
restore error classification, and the subprocess executors.

The executors are tested with ``asyncio.create_subprocess_exec`` patched,
so no PostgreSQL client binaries are needed.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pg_snapshot.pgdump.errors import (
    PGDumpError,
    PGRestoreError,
    PGRestoreErrors,
    RelationAlreadyExistsError,
    RestoreErrorKind,
    SnapshotError,
    classify_restore_error,
    parse_restore_output,
)
from pg_snapshot.pgdump.identifiers import quote_identifier
from pg_snapshot.pgdump.models import PGDumpOptions, PGRestoreOptions
from pg_snapshot.pgdump.runner import run_pg_dump, run_pg_restore

SUBPROCESS_EXEC = "pg_snapshot.pgdump.runner.asyncio.create_subprocess_exec"


def _process(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    return proc


# ------------------------------------------------------------------
# Options
# ------------------------------------------------------------------


class TestPGDumpOptions:
    def test_minimal_args(self):
        opts = PGDumpOptions(connection_string="postgresql://localhost/src")
        assert opts.to_args() == ["postgresql://localhost/src", "--format=p"]

    def test_full_args(self):
        opts = PGDumpOptions(
            connection_string="src",
            format="c",
            clean=True,
            schema_only=True,
            schemas=["inventory"],
            exclude_tables=["audit_log", '"Line Items"'],
        )
        assert opts.to_args() == [
            "src",
            "--format=c",
            "--schema-only",
            "--clean",
            "--schema",
            "inventory",
            "--exclude-table",
            "audit_log",
            "--exclude-table",
            '"Line Items"',
        ]

    def test_frozen(self):
        opts = PGDumpOptions(connection_string="src")
        with pytest.raises(Exception):
            opts.format = "c"

    def test_equality(self):
        a = PGDumpOptions(connection_string="src", schemas=["s"])
        b = PGDumpOptions(connection_string="src", schemas=["s"])
        assert a == b


class TestPGRestoreOptions:
    def test_plain_format(self):
        opts = PGRestoreOptions(connection_string="dst")
        assert opts.is_plain
        assert opts.to_psql_args() == ["--dbname=dst", "--no-psqlrc", "--quiet"]

    def test_archive_args(self):
        opts = PGRestoreOptions(
            connection_string="dst", format="c", schema_only=True, clean=True
        )
        assert not opts.is_plain
        assert opts.to_args() == [
            "--dbname=dst",
            "--format=c",
            "--schema-only",
            "--clean",
        ]


class TestQuoteIdentifier:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("test_schema", "test_schema"),
            ("public", "public"),
            ("My Schema", '"My Schema"'),
            ("Orders", '"Orders"'),
            ('odd"name', '"odd""name"'),
            ("user", '"user"'),
        ],
    )
    def test_quote(self, name, expected):
        assert quote_identifier(name) == expected


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------


class TestRestoreErrorClassification:
    def test_already_exists_is_ignorable(self):
        err = RelationAlreadyExistsError('relation "users" already exists')
        assert classify_restore_error(err) is RestoreErrorKind.IGNORABLE

    def test_other_restore_error_is_fatal(self):
        assert classify_restore_error(PGRestoreError("boom")) is RestoreErrorKind.FATAL

    def test_foreign_error_is_fatal(self):
        assert classify_restore_error(ValueError("boom")) is RestoreErrorKind.FATAL

    def test_hierarchy(self):
        assert issubclass(RelationAlreadyExistsError, PGRestoreError)
        assert issubclass(PGRestoreErrors, SnapshotError)
        assert issubclass(PGDumpError, SnapshotError)


class TestPGRestoreErrors:
    def test_partition(self):
        ignorable = RelationAlreadyExistsError("exists")
        fatal = PGRestoreError("syntax error")
        errs = PGRestoreErrors(ignorable, fatal)

        assert errs.errors == [ignorable, fatal]
        assert errs.ignored_errors() == [ignorable]
        assert errs.critical_errors() == [fatal]
        assert errs.has_critical_errors()

    def test_only_ignorable(self):
        errs = PGRestoreErrors(RelationAlreadyExistsError("exists"))
        assert errs.critical_errors() == []
        assert not errs.has_critical_errors()

    def test_message_joins_errors(self):
        errs = PGRestoreErrors(PGRestoreError("one"), PGRestoreError("two"))
        assert str(errs) == "one; two"

    def test_empty_composite(self):
        errs = PGRestoreErrors()
        assert str(errs) == "restore failed with no reported errors"
        assert not errs.has_critical_errors()


class TestParseRestoreOutput:
    def test_already_exists(self):
        errs = parse_restore_output(
            'psql:<stdin>:12: ERROR:  relation "users" already exists'
        )
        assert len(errs) == 1
        assert isinstance(errs[0], RelationAlreadyExistsError)
        assert "users" in str(errs[0])

    def test_mixed_output(self):
        output = "\n".join(
            [
                "SET",
                'psql:<stdin>:5: ERROR:  schema "inventory" already exists',
                "psql:<stdin>:9: WARNING:  no privileges were granted",
                'psql:<stdin>:20: ERROR:  syntax error at or near "TABEL"',
                "pg_restore: error: could not execute query",
            ]
        )
        errs = parse_restore_output(output)

        assert [type(e) for e in errs] == [
            RelationAlreadyExistsError,
            PGRestoreError,
            PGRestoreError,
        ]

    def test_clean_output(self):
        assert parse_restore_output("SET\nCREATE TABLE\n") == []

    def test_empty_output(self):
        assert parse_restore_output("") == []


# ------------------------------------------------------------------
# Executors
# ------------------------------------------------------------------


class TestRunPGDump:
    async def test_returns_stdout(self):
        proc = _process(stdout=b"CREATE TABLE items ();")
        opts = PGDumpOptions(connection_string="src", schema_only=True)

        with patch(SUBPROCESS_EXEC, AsyncMock(return_value=proc)) as exec_mock:
            dump = await run_pg_dump(opts)

        assert dump == b"CREATE TABLE items ();"
        assert exec_mock.call_args.args == ("pg_dump", "src", "--format=p", "--schema-only")
        proc.communicate.assert_awaited_once_with(None)

    async def test_nonzero_exit(self):
        proc = _process(returncode=1, stderr=b"pg_dump: error: connection refused\n")

        with patch(SUBPROCESS_EXEC, AsyncMock(return_value=proc)):
            with pytest.raises(PGDumpError) as exc_info:
                await run_pg_dump(PGDumpOptions(connection_string="src"))

        assert "connection refused" in str(exc_info.value)
        assert exc_info.value.stderr == "pg_dump: error: connection refused"

    async def test_binary_missing(self):
        with patch(SUBPROCESS_EXEC, AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(PGDumpError, match="not found on PATH"):
                await run_pg_dump(PGDumpOptions(connection_string="src"))


class TestRunPGRestore:
    async def test_plain_format_uses_psql(self):
        proc = _process(stdout=b"SET\n")
        opts = PGRestoreOptions(connection_string="dst", schema_only=True)

        with patch(SUBPROCESS_EXEC, AsyncMock(return_value=proc)) as exec_mock:
            output = await run_pg_restore(opts, b"dump")

        assert output == "SET\n"
        assert exec_mock.call_args.args == (
            "psql",
            "--dbname=dst",
            "--no-psqlrc",
            "--quiet",
        )
        proc.communicate.assert_awaited_once_with(b"dump")

    async def test_archive_format_uses_pg_restore(self):
        proc = _process()
        opts = PGRestoreOptions(connection_string="dst", format="c")

        with patch(SUBPROCESS_EXEC, AsyncMock(return_value=proc)) as exec_mock:
            await run_pg_restore(opts, b"dump")

        assert exec_mock.call_args.args[0] == "pg_restore"
        assert "--format=c" in exec_mock.call_args.args

    async def test_reported_errors_raise_composite(self):
        """psql exits 0 after a failing statement; the output still counts."""
        proc = _process(
            returncode=0,
            stderr=b'psql:<stdin>:3: ERROR:  relation "items" already exists\n',
        )

        with patch(SUBPROCESS_EXEC, AsyncMock(return_value=proc)):
            with pytest.raises(PGRestoreErrors) as exc_info:
                await run_pg_restore(PGRestoreOptions(connection_string="dst"), b"dump")

        assert len(exc_info.value.errors) == 1
        assert not exc_info.value.has_critical_errors()

    async def test_nonzero_exit_without_errors(self):
        proc = _process(returncode=2, stderr=b"connection to server failed\n")

        with patch(SUBPROCESS_EXEC, AsyncMock(return_value=proc)):
            with pytest.raises(PGRestoreError, match="exited with status 2"):
                await run_pg_restore(PGRestoreOptions(connection_string="dst"), b"dump")

    async def test_binary_missing(self):
        with patch(SUBPROCESS_EXEC, AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(PGRestoreError, match="psql not found on PATH"):
                await run_pg_restore(PGRestoreOptions(connection_string="dst"), b"dump")
