"""Option models for pg_dump and restore runs.

Both models are frozen: they are derived once from a snapshot request and
handed to the executors unchanged.

Usage:
    from pg_snapshot.pgdump.models import PGDumpOptions, PGRestoreOptions

    opts = PGDumpOptions(
        connection_string="postgresql://localhost/src",
        format="p",
        schema_only=True,
        schemas=["inventory"],
        exclude_tables=["audit_log"],
    )
    opts.to_args()
    # ['postgresql://localhost/src', '--format=p', '--schema-only',
    #  '--schema', 'inventory', '--exclude-table', 'audit_log']
"""

from pydantic import BaseModel, ConfigDict, Field


class PGDumpOptions(BaseModel):
    """Options for a ``pg_dump`` run."""

    model_config = ConfigDict(frozen=True)

    connection_string: str
    format: str = "p"                   # p (plain), c (custom), d (directory), t (tar)
    clean: bool = False                 # emit DROP statements before CREATE
    schema_only: bool = False
    schemas: list[str] = Field(default_factory=list)          # quoted schema names
    exclude_tables: list[str] = Field(default_factory=list)   # quoted table names

    def to_args(self) -> list[str]:
        """Render the options as ``pg_dump`` command-line arguments."""
        args = [self.connection_string, f"--format={self.format}"]
        if self.schema_only:
            args.append("--schema-only")
        if self.clean:
            args.append("--clean")
        for schema in self.schemas:
            args.extend(["--schema", schema])
        for table in self.exclude_tables:
            args.extend(["--exclude-table", table])
        return args


class PGRestoreOptions(BaseModel):
    """Options for applying a dump to a destination database."""

    model_config = ConfigDict(frozen=True)

    connection_string: str
    format: str = "p"
    schema_only: bool = False
    clean: bool = False

    @property
    def is_plain(self) -> bool:
        """Plain SQL dumps are applied with psql rather than pg_restore."""
        return self.format == "p"

    def to_args(self) -> list[str]:
        """Render the options as ``pg_restore`` command-line arguments."""
        args = [f"--dbname={self.connection_string}", f"--format={self.format}"]
        if self.schema_only:
            args.append("--schema-only")
        if self.clean:
            args.append("--clean")
        return args

    def to_psql_args(self) -> list[str]:
        """Render the options as ``psql`` arguments reading the dump from stdin."""
        return [f"--dbname={self.connection_string}", "--no-psqlrc", "--quiet"]
