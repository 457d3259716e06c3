"""Database connectivity, pooling and query execution."""

from dbex_mariadb.db.canceller import QueryCanceller, RunningQuery
from dbex_mariadb.db.connection import (
    ConnectionFailedError,
    DatabaseError,
    IncompleteFieldsError,
    PoolNotFoundError,
    QueryError,
    build_engine,
    create_pool,
)
from dbex_mariadb.db.executor import normalize_rows, run_query
from dbex_mariadb.db.pools import SessionPoolRegistry
from dbex_mariadb.db.types import column_type

__all__ = [
    "ConnectionFailedError",
    "DatabaseError",
    "IncompleteFieldsError",
    "PoolNotFoundError",
    "QueryCanceller",
    "QueryError",
    "RunningQuery",
    "SessionPoolRegistry",
    "build_engine",
    "column_type",
    "create_pool",
    "normalize_rows",
    "run_query",
]
