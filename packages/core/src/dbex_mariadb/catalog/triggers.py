"""Triggers of a schema."""

from sqlalchemy import Connection, RowMapping

from dbex_mariadb.catalog.nodes import (
    DEFINITION_ACTION,
    ICON_TRIGGER,
    fetch_all,
    node_name,
    show_create,
)
from dbex_mariadb_models import NodeKind, ResultSet, TreeNode

TRIGGERS_SQL = """
    SELECT TRIGGER_NAME AS name,
           ACTION_TIMING AS timing,
           EVENT_MANIPULATION AS event,
           EVENT_OBJECT_TABLE AS table_name
    FROM information_schema.TRIGGERS
    WHERE TRIGGER_SCHEMA = :schema {name_filter}
    ORDER BY TRIGGER_NAME
"""


def trigger_node(schema: str, row: RowMapping) -> TreeNode:
    name = row["name"]
    return TreeNode(
        label=name,
        name=node_name(schema, "trigger", name),
        kind=NodeKind.TRIGGER,
        icon=ICON_TRIGGER,
        details=f"{row['timing']} {row['event']} ON {row['table_name']}",
        collapsed=True,
        datasets={"schema": schema, "trigger": name},
        actions=[DEFINITION_ACTION],
    )


def _fetch_triggers(conn: Connection, schema: str, name: str | None = None) -> list[RowMapping]:
    if name is None:
        return fetch_all(conn, TRIGGERS_SQL.format(name_filter=""), {"schema": schema})
    return fetch_all(
        conn,
        TRIGGERS_SQL.format(name_filter="AND TRIGGER_NAME = :name"),
        {"schema": schema, "name": name},
    )


def get_triggers(conn: Connection, schema: str) -> list[TreeNode]:
    return [trigger_node(schema, row) for row in _fetch_triggers(conn, schema)]


def get_content(conn: Connection, schema: str, name: str) -> ResultSet | None:
    ddl = show_create(conn, "TRIGGER", schema, name, "SQL Original Statement")
    return ResultSet.structure(ddl) if ddl is not None else None


def refresh_trigger(conn: Connection, schema: str, name: str) -> TreeNode | None:
    rows = _fetch_triggers(conn, schema, name)
    return trigger_node(schema, rows[0]) if rows else None
