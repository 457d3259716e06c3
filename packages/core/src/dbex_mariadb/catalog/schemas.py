"""Schema list and per-schema topic folders."""

from sqlalchemy import Connection, RowMapping

from dbex_mariadb.catalog.nodes import ICON_FOLDER, ICON_SCHEMA, fetch_all, node_name
from dbex_mariadb_models import NodeKind, TreeNode

SCHEMAS_SQL = """
    SELECT s.SCHEMA_NAME AS name,
           (SELECT COUNT(*) FROM information_schema.TABLES t
            WHERE t.TABLE_SCHEMA = s.SCHEMA_NAME
              AND t.TABLE_TYPE = 'BASE TABLE') AS table_count
    FROM information_schema.SCHEMATA s
    {schema_filter}
    ORDER BY s.SCHEMA_NAME
"""

TOPICS_SQL = """
    SELECT
        (SELECT COUNT(*) FROM information_schema.TABLES
         WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'BASE TABLE') AS tables,
        (SELECT COUNT(*) FROM information_schema.VIEWS
         WHERE TABLE_SCHEMA = :schema) AS views,
        (SELECT COUNT(*) FROM information_schema.ROUTINES
         WHERE ROUTINE_SCHEMA = :schema AND ROUTINE_TYPE = 'FUNCTION') AS functions,
        (SELECT COUNT(*) FROM information_schema.ROUTINES
         WHERE ROUTINE_SCHEMA = :schema AND ROUTINE_TYPE = 'PROCEDURE') AS procedures,
        (SELECT COUNT(*) FROM information_schema.TRIGGERS
         WHERE TRIGGER_SCHEMA = :schema) AS triggers,
        (SELECT COUNT(*) FROM information_schema.EVENTS
         WHERE EVENT_SCHEMA = :schema) AS events
"""

# (context key, label), in display order
TOPICS = (
    ("tables", "Tables"),
    ("views", "Views"),
    ("functions", "Functions"),
    ("procedures", "Procedures"),
    ("triggers", "Triggers"),
    ("events", "Events"),
)


def schema_node(row: RowMapping) -> TreeNode:
    name = row["name"]
    return TreeNode(
        label=name,
        name=name,
        kind=NodeKind.SCHEMA,
        icon=ICON_SCHEMA,
        details=str(row["table_count"]),
        collapsed=True,
        datasets={"database": name},
    )


def _fetch_schemas(conn: Connection, schema: str | None = None) -> list[RowMapping]:
    if schema is None:
        return fetch_all(conn, SCHEMAS_SQL.format(schema_filter=""))
    return fetch_all(
        conn, SCHEMAS_SQL.format(schema_filter="WHERE s.SCHEMA_NAME = :schema"), {"schema": schema}
    )


def get_schemas(conn: Connection) -> list[TreeNode]:
    """All schemas visible to the session user."""
    return [schema_node(row) for row in _fetch_schemas(conn)]


def get_topics(conn: Connection, schema: str) -> list[TreeNode]:
    """Folder nodes (tables, views, routines, triggers, events) of a schema."""
    rows = fetch_all(conn, TOPICS_SQL, {"schema": schema})
    counts = rows[0] if rows else {}
    return [
        TreeNode(
            label=label,
            name=node_name(schema, key),
            kind=NodeKind.FOLDER,
            icon=ICON_FOLDER,
            details=str(counts.get(key, 0)),
            collapsed=True,
            datasets={key: schema},
        )
        for key, label in TOPICS
    ]


def refresh_schema(conn: Connection, schema: str) -> TreeNode | None:
    rows = _fetch_schemas(conn, schema)
    return schema_node(rows[0]) if rows else None
