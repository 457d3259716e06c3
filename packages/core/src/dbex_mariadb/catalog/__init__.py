"""Metadata catalog: tree nodes and definitions built from information_schema."""

from dbex_mariadb.catalog import events, routines, schemas, tables, triggers, views
from dbex_mariadb.catalog.nodes import DEFINITION, STRUCTURE, quote_identifier
from dbex_mariadb.catalog.routines import RoutineKind

__all__ = [
    "DEFINITION",
    "STRUCTURE",
    "RoutineKind",
    "events",
    "quote_identifier",
    "routines",
    "schemas",
    "tables",
    "triggers",
    "views",
]
