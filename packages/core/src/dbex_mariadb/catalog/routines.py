"""Stored functions and procedures.

Both kinds share one operation shape; the kind tag selects the metadata
source (ROUTINE_TYPE filter, SHOW CREATE variant, icon and detail).
"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Connection, RowMapping

from dbex_mariadb.catalog.nodes import (
    DEFINITION_ACTION,
    ICON_FUNCTION,
    ICON_PROCEDURE,
    fetch_all,
    node_name,
    show_create,
)
from dbex_mariadb_models import NodeKind, ResultSet, TreeNode


class RoutineKind(str, Enum):
    """Routine kind tag carried in node contexts."""

    FUNCTION = "FUNCTION"
    PROCEDURE = "PROCEDURE"


@dataclass(frozen=True)
class RoutineSource:
    """Where the metadata of one routine kind comes from."""

    routine_type: str
    create_column: str
    icon: str


SOURCES = {
    RoutineKind.FUNCTION: RoutineSource("FUNCTION", "Create Function", ICON_FUNCTION),
    RoutineKind.PROCEDURE: RoutineSource("PROCEDURE", "Create Procedure", ICON_PROCEDURE),
}

ROUTINES_SQL = """
    SELECT ROUTINE_NAME AS name, DTD_IDENTIFIER AS returns
    FROM information_schema.ROUTINES
    WHERE ROUTINE_SCHEMA = :schema AND ROUTINE_TYPE = :routine_type {name_filter}
    ORDER BY ROUTINE_NAME
"""


def routine_node(schema: str, kind: RoutineKind, row: RowMapping) -> TreeNode:
    name = row["name"]
    return TreeNode(
        label=name,
        name=node_name(schema, kind.value.lower(), name),
        kind=NodeKind.ROUTINE,
        icon=SOURCES[kind].icon,
        details=row["returns"] if kind is RoutineKind.FUNCTION else None,
        collapsed=True,
        datasets={"schema": schema, "routine": name, "routineType": kind.value},
        actions=[DEFINITION_ACTION],
    )


def _fetch_routines(
    conn: Connection, schema: str, kind: RoutineKind, name: str | None = None
) -> list[RowMapping]:
    params = {"schema": schema, "routine_type": SOURCES[kind].routine_type}
    name_filter = ""
    if name is not None:
        name_filter = "AND ROUTINE_NAME = :name"
        params["name"] = name
    return fetch_all(conn, ROUTINES_SQL.format(name_filter=name_filter), params)


def get_routines(conn: Connection, schema: str, kind: RoutineKind) -> list[TreeNode]:
    return [routine_node(schema, kind, row) for row in _fetch_routines(conn, schema, kind)]


def get_content(conn: Connection, schema: str, name: str, kind: RoutineKind) -> ResultSet | None:
    """Definition text of a routine."""
    source = SOURCES[kind]
    ddl = show_create(conn, source.routine_type, schema, name, source.create_column)
    return ResultSet.structure(ddl) if ddl is not None else None


def refresh_routine(
    conn: Connection, schema: str, name: str, kind: RoutineKind
) -> TreeNode | None:
    rows = _fetch_routines(conn, schema, kind, name)
    return routine_node(schema, kind, rows[0]) if rows else None
