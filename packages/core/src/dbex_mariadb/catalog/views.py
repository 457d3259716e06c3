"""View listing, preview and definition."""

from sqlalchemy import Connection

from dbex_mariadb.catalog.columns import get_columns
from dbex_mariadb.catalog.nodes import (
    ICON_VIEW,
    STRUCTURE_ACTION,
    fetch_all,
    node_name,
    show_create,
)
from dbex_mariadb.catalog.tables import preview_sql
from dbex_mariadb.db.executor import run_query
from dbex_mariadb_models import NodeKind, ResultSet, TreeNode

VIEWS_SQL = """
    SELECT TABLE_NAME AS name, IS_UPDATABLE AS updatable
    FROM information_schema.VIEWS
    WHERE TABLE_SCHEMA = :schema {name_filter}
    ORDER BY TABLE_NAME
"""


def view_node(schema: str, name: str, updatable: str | None, columns: list[TreeNode]) -> TreeNode:
    return TreeNode(
        label=name,
        name=node_name(schema, name),
        kind=NodeKind.VIEW,
        icon=ICON_VIEW,
        details="updatable" if updatable == "YES" else None,
        collapsed=True,
        datasets={"schema": schema, "view": name},
        actions=[STRUCTURE_ACTION],
        children=columns,
    )


def get_views(conn: Connection, schema: str) -> list[TreeNode]:
    columns = get_columns(conn, schema)
    rows = fetch_all(conn, VIEWS_SQL.format(name_filter=""), {"schema": schema})
    return [
        view_node(schema, row["name"], row["updatable"], columns.get(row["name"], []))
        for row in rows
    ]


def get_content(conn: Connection, schema: str, view: str, limit: int) -> ResultSet:
    return run_query(conn, preview_sql(schema, view, limit), echo_query=True)


def get_structure(conn: Connection, schema: str, view: str) -> ResultSet | None:
    ddl = show_create(conn, "VIEW", schema, view, "Create View")
    return ResultSet.structure(ddl) if ddl is not None else None


def refresh_view(conn: Connection, schema: str, view: str) -> TreeNode | None:
    rows = fetch_all(
        conn,
        VIEWS_SQL.format(name_filter="AND TABLE_NAME = :name"),
        {"schema": schema, "name": view},
    )
    if not rows:
        return None
    columns = get_columns(conn, schema, view)
    return view_node(schema, view, rows[0]["updatable"], columns.get(view, []))
