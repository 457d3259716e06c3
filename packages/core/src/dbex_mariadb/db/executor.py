"""Ad-hoc query execution and result normalization."""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Connection
from sqlalchemy.exc import SQLAlchemyError

from dbex_mariadb.db.connection import QueryError, driver_message, driver_sql
from dbex_mariadb.db.types import column_type
from dbex_mariadb_models import ResultColumn, ResultSet

logger = logging.getLogger(__name__)


def normalize_rows(
    description: Sequence[Sequence[Any]], rows: Sequence[Sequence[Any]], query: str | None = None
) -> ResultSet:
    """Build a tabular ResultSet from a DB-API description and rows.

    Column names and types come from the cursor description so that an
    empty result still carries its columns.
    """
    columns = [ResultColumn(name=str(item[0]), type=column_type(item[1])) for item in description]
    data = [list(row) for row in rows]
    return ResultSet.tabular(columns, data, query=query)


def run_query(conn: Connection, sql: str, *, echo_query: bool = False) -> ResultSet:
    """Submit a statement and normalize its outcome.

    Statements that return no rows yield a ResultSet carrying only the
    affected-row count. Nothing is retried.

    Args:
        conn: Pooled connection
        sql: Statement text, passed to the driver verbatim
        echo_query: Attach the statement text to tabular results

    Raises:
        QueryError: If the server rejects or fails the statement
    """
    logger.debug(f"Executing: {sql}")
    try:
        result = conn.exec_driver_sql(driver_sql(conn, sql))
        if not result.returns_rows:
            affected = result.rowcount
            result.close()
            return ResultSet.affected(max(affected, 0))
        description = result.cursor.description
        rows = result.fetchall()
    except SQLAlchemyError as e:
        raise QueryError(driver_message(e), sql) from e

    return normalize_rows(description, rows, query=sql if echo_query else None)
