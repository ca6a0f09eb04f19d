"""Tests for the public package exports."""

import importlib

import pytest

import pg_snapshot


class TestTopLevelExports:
    """Verify the top-level package re-exports the public API."""

    def test_version(self) -> None:
        assert pg_snapshot.__version__ == "0.1.0"

    def test_all_names_accessible(self) -> None:
        for name in pg_snapshot.__all__:
            assert hasattr(pg_snapshot, name), f"{name} listed in __all__ but missing"

    @pytest.mark.parametrize(
        "name",
        [
            "Snapshot",
            "SnapshotGenerator",
            "create_snapshot_generator",
            "get_snapshot_generator",
            "PGRestoreErrors",
            "SchemaLogInsertError",
            "PostgresSchemaLogStore",
            "Querier",
        ],
    )
    def test_key_names_exported(self, name: str) -> None:
        assert name in pg_snapshot.__all__


class TestSubpackageExports:
    @pytest.mark.parametrize(
        "module",
        [
            "pg_snapshot.adapters",
            "pg_snapshot.config",
            "pg_snapshot.pgdump",
            "pg_snapshot.schemalog",
            "pg_snapshot.snapshot",
        ],
    )
    def test_all_names_accessible(self, module: str) -> None:
        mod = importlib.import_module(module)
        for name in mod.__all__:
            assert hasattr(mod, name), f"{module}.{name} listed in __all__ but missing"

    def test_same_objects(self) -> None:
        from pg_snapshot.snapshot.generator import SnapshotGenerator

        assert pg_snapshot.SnapshotGenerator is SnapshotGenerator
