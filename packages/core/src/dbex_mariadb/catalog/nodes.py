"""Shared helpers for catalog node construction."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import Connection, RowMapping, text
from sqlalchemy.exc import SQLAlchemyError

from dbex_mariadb.db.connection import QueryError, driver_message, driver_sql
from dbex_mariadb_models import NodeAction

logger = logging.getLogger(__name__)

ICON_SCHEMA = "icon-database"
ICON_FOLDER = "icon-folder"
ICON_TABLE = "icon-table"
ICON_VIEW = "icon-view"
ICON_FUNCTION = "icon-function"
ICON_PROCEDURE = "icon-procedure"
ICON_TRIGGER = "icon-trigger"
ICON_EVENT = "icon-event"
ICON_PRIMARY_KEY = "icon-pk"
ICON_FOREIGN_KEY = "icon-fk"
ICON_FIELD = "icon-field"

STRUCTURE = "structure"
DEFINITION = "definition"

STRUCTURE_ACTION = NodeAction(
    name=STRUCTURE, icon="icon-struct", description="Show structure"
)
DEFINITION_ACTION = NodeAction(
    name=DEFINITION, icon="icon-struct", description="Show definition"
)


def quote_identifier(name: str) -> str:
    """Back-tick quote an identifier for interpolation into SQL."""
    return "`" + name.replace("`", "``") + "`"


def qualified_name(schema: str, name: str) -> str:
    return f"{quote_identifier(schema)}.{quote_identifier(name)}"


def node_name(*parts: str) -> str:
    """Build a node name unique among its siblings."""
    return ".".join(parts)


def fetch_all(
    conn: Connection, sql: str, params: Mapping[str, Any] | None = None
) -> list[RowMapping]:
    """Run an introspection query and return its rows as mappings.

    Raises:
        QueryError: If the server rejects the query
    """
    logger.debug(f"Catalog query: {sql.strip()} {dict(params or {})}")
    try:
        return list(conn.execute(text(sql), dict(params or {})).mappings())
    except SQLAlchemyError as e:
        raise QueryError(driver_message(e), sql) from e


def show_create(conn: Connection, kind: str, schema: str, name: str, column: str) -> str | None:
    """Run ``SHOW CREATE <kind>`` and return the definition column.

    A missing object is a server error and raises QueryError. None means
    the server returned no row.

    Raises:
        QueryError: If the server rejects the statement
    """
    sql = f"SHOW CREATE {kind} {qualified_name(schema, name)}"
    logger.debug(f"Catalog query: {sql}")
    try:
        row = conn.exec_driver_sql(driver_sql(conn, sql)).mappings().first()
    except SQLAlchemyError as e:
        raise QueryError(driver_message(e), sql) from e
    if row is None:
        return None
    return row.get(column) or ""
