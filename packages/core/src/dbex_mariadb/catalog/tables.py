"""Table listing, preview and structure."""

from sqlalchemy import Connection, RowMapping

from dbex_mariadb.catalog.columns import get_columns
from dbex_mariadb.catalog.nodes import (
    ICON_TABLE,
    STRUCTURE_ACTION,
    fetch_all,
    node_name,
    qualified_name,
    show_create,
)
from dbex_mariadb.db.executor import run_query
from dbex_mariadb_models import NodeKind, ResultSet, TreeNode

TABLES_SQL = """
    SELECT TABLE_NAME AS name, TABLE_ROWS AS row_estimate, ENGINE AS engine
    FROM information_schema.TABLES
    WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'BASE TABLE' {name_filter}
    ORDER BY TABLE_NAME
"""


def preview_sql(schema: str, name: str, limit: int) -> str:
    """Bounded query used when a table or view is opened."""
    return f"SELECT * FROM {qualified_name(schema, name)} LIMIT {int(limit)}"


def table_node(schema: str, row: RowMapping, columns: list[TreeNode]) -> TreeNode:
    name = row["name"]
    estimate = row["row_estimate"]
    return TreeNode(
        label=name,
        name=node_name(schema, name),
        kind=NodeKind.TABLE,
        icon=ICON_TABLE,
        details=f"~{estimate} rows" if estimate is not None else row["engine"],
        collapsed=True,
        datasets={"schema": schema, "table": name},
        actions=[STRUCTURE_ACTION],
        children=columns,
    )


def _fetch_tables(conn: Connection, schema: str, name: str | None = None) -> list[RowMapping]:
    if name is None:
        return fetch_all(conn, TABLES_SQL.format(name_filter=""), {"schema": schema})
    return fetch_all(
        conn,
        TABLES_SQL.format(name_filter="AND TABLE_NAME = :name"),
        {"schema": schema, "name": name},
    )


def get_tables(conn: Connection, schema: str) -> list[TreeNode]:
    """Table nodes of a schema, each with its column children."""
    columns = get_columns(conn, schema)
    return [
        table_node(schema, row, columns.get(row["name"], []))
        for row in _fetch_tables(conn, schema)
    ]


def get_content(conn: Connection, schema: str, table: str, limit: int) -> ResultSet:
    """Preview of the first ``limit`` rows, with the query that produced it."""
    return run_query(conn, preview_sql(schema, table, limit), echo_query=True)


def get_structure(conn: Connection, schema: str, table: str) -> ResultSet | None:
    ddl = show_create(conn, "TABLE", schema, table, "Create Table")
    return ResultSet.structure(ddl) if ddl is not None else None


def refresh_table(conn: Connection, schema: str, table: str) -> TreeNode | None:
    """Rebuild a table node from current data; None if the table is gone."""
    rows = _fetch_tables(conn, schema, table)
    if not rows:
        return None
    columns = get_columns(conn, schema, table)
    return table_node(schema, rows[0], columns.get(table, []))
