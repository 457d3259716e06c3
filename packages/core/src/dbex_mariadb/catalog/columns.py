"""Column children of tables and views."""

from collections import defaultdict

from sqlalchemy import Connection, RowMapping

from dbex_mariadb.catalog.nodes import (
    ICON_FIELD,
    ICON_FOREIGN_KEY,
    ICON_PRIMARY_KEY,
    fetch_all,
    node_name,
)
from dbex_mariadb_models import ColumnKey, NodeKind, TreeNode

COLUMNS_SQL = """
    SELECT c.TABLE_NAME AS table_name,
           c.COLUMN_NAME AS column_name,
           c.COLUMN_TYPE AS column_type,
           c.COLUMN_KEY AS column_key,
           EXISTS (
               SELECT 1 FROM information_schema.KEY_COLUMN_USAGE k
               WHERE k.TABLE_SCHEMA = c.TABLE_SCHEMA
                 AND k.TABLE_NAME = c.TABLE_NAME
                 AND k.COLUMN_NAME = c.COLUMN_NAME
                 AND k.REFERENCED_TABLE_NAME IS NOT NULL
           ) AS is_foreign
    FROM information_schema.COLUMNS c
    WHERE c.TABLE_SCHEMA = :schema {table_filter}
    ORDER BY c.TABLE_NAME, c.ORDINAL_POSITION
"""

_ICONS = {
    ColumnKey.PRIMARY: ICON_PRIMARY_KEY,
    ColumnKey.FOREIGN: ICON_FOREIGN_KEY,
    ColumnKey.PLAIN: ICON_FIELD,
}


def classify(column_key: str | None, is_foreign: object) -> ColumnKey:
    """Primary key wins over foreign key; everything else is plain."""
    if column_key == "PRI":
        return ColumnKey.PRIMARY
    if is_foreign:
        return ColumnKey.FOREIGN
    return ColumnKey.PLAIN


def column_node(schema: str, row: RowMapping) -> TreeNode:
    table = row["table_name"]
    column = row["column_name"]
    key = classify(row["column_key"], row["is_foreign"])
    return TreeNode(
        label=column,
        name=node_name(schema, table, column),
        kind=NodeKind.COLUMN,
        icon=_ICONS[key],
        details=row["column_type"],
        collapsed=False,
        datasets={"schema": schema, "columnOf": table, "column": column},
        column_key=key,
    )


def get_columns(
    conn: Connection, schema: str, table: str | None = None
) -> dict[str, list[TreeNode]]:
    """Column nodes of a schema, grouped by table (or of a single table)."""
    params = {"schema": schema}
    table_filter = ""
    if table is not None:
        table_filter = "AND c.TABLE_NAME = :table"
        params["table"] = table

    grouped: dict[str, list[TreeNode]] = defaultdict(list)
    for row in fetch_all(conn, COLUMNS_SQL.format(table_filter=table_filter), params):
        grouped[row["table_name"]].append(column_node(schema, row))
    return dict(grouped)
