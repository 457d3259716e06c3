"""Scheduled events of a schema."""

from sqlalchemy import Connection, RowMapping

from dbex_mariadb.catalog.nodes import (
    DEFINITION_ACTION,
    ICON_EVENT,
    fetch_all,
    node_name,
    show_create,
)
from dbex_mariadb_models import NodeKind, ResultSet, TreeNode

EVENTS_SQL = """
    SELECT EVENT_NAME AS name, EVENT_TYPE AS event_type, STATUS AS status
    FROM information_schema.EVENTS
    WHERE EVENT_SCHEMA = :schema {name_filter}
    ORDER BY EVENT_NAME
"""


def event_node(schema: str, row: RowMapping) -> TreeNode:
    name = row["name"]
    return TreeNode(
        label=name,
        name=node_name(schema, "event", name),
        kind=NodeKind.EVENT,
        icon=ICON_EVENT,
        details=f"{row['event_type']} {row['status']}".lower(),
        collapsed=True,
        datasets={"schema": schema, "event": name},
        actions=[DEFINITION_ACTION],
    )


def _fetch_events(conn: Connection, schema: str, name: str | None = None) -> list[RowMapping]:
    if name is None:
        return fetch_all(conn, EVENTS_SQL.format(name_filter=""), {"schema": schema})
    return fetch_all(
        conn,
        EVENTS_SQL.format(name_filter="AND EVENT_NAME = :name"),
        {"schema": schema, "name": name},
    )


def get_events(conn: Connection, schema: str) -> list[TreeNode]:
    return [event_node(schema, row) for row in _fetch_events(conn, schema)]


def get_content(conn: Connection, schema: str, name: str) -> ResultSet | None:
    ddl = show_create(conn, "EVENT", schema, name, "Create Event")
    return ResultSet.structure(ddl) if ddl is not None else None


def refresh_event(conn: Connection, schema: str, name: str) -> TreeNode | None:
    rows = _fetch_events(conn, schema, name)
    return event_node(schema, rows[0]) if rows else None
