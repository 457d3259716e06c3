"""Shared Pydantic models for dbex-mariadb."""

from dbex_mariadb_models.connection import ConnectionFields
from dbex_mariadb_models.result import ColumnType, ResultColumn, ResultSet
from dbex_mariadb_models.tree import ColumnKey, NodeAction, NodeKind, TreeNode

__version__ = "0.1.0"

__all__ = [
    # Connection
    "ConnectionFields",
    # Tree
    "ColumnKey",
    "NodeAction",
    "NodeKind",
    "TreeNode",
    # Results
    "ColumnType",
    "ResultColumn",
    "ResultSet",
]
