"""Database querier package.

Provides the ``Querier`` Protocol, the ``QuerierBuilder`` alias, and the
async PostgreSQL implementation used by default.

Usage:
    from pg_snapshot.adapters import Querier, AsyncPostgresQuerier, connect_querier
"""

from pg_snapshot.adapters.base import Querier, QuerierBuilder
from pg_snapshot.adapters.postgres import AsyncPostgresQuerier, connect_querier

__all__ = [
    "Querier",
    "QuerierBuilder",
    "AsyncPostgresQuerier",
    "connect_querier",
]
