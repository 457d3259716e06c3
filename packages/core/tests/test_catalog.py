"""Tests for the metadata catalog against a mocked connection."""

from unittest.mock import MagicMock

import pytest
from pymysql.constants import FIELD_TYPE
from pymysql.cursors import Cursor
from sqlalchemy.exc import ProgrammingError

from conftest import mapping_result, show_create_result
from dbex_mariadb.catalog import events, routines, schemas, tables, triggers, views
from dbex_mariadb.catalog.columns import classify
from dbex_mariadb.catalog.nodes import quote_identifier
from dbex_mariadb.catalog.routines import RoutineKind
from dbex_mariadb.db.connection import QueryError
from dbex_mariadb_models import ColumnKey, NodeKind


def _column(table, name, column_type="int(11)", key="", is_foreign=0):
    return {
        "table_name": table,
        "column_name": name,
        "column_type": column_type,
        "column_key": key,
        "is_foreign": is_foreign,
    }


@pytest.fixture
def conn() -> MagicMock:
    return MagicMock()


class TestQuoting:
    def test_quote_identifier(self):
        assert quote_identifier("orders") == "`orders`"
        assert quote_identifier("we`ird") == "`we``ird`"

    def test_preview_is_bounded(self):
        assert tables.preview_sql("sales", "orders", 100) == (
            "SELECT * FROM `sales`.`orders` LIMIT 100"
        )


class TestSchemas:
    def test_get_schemas(self, conn):
        conn.execute.return_value = mapping_result(
            [{"name": "inventory", "table_count": 3}, {"name": "sales", "table_count": 12}]
        )
        nodes = schemas.get_schemas(conn)

        assert [n.name for n in nodes] == ["inventory", "sales"]
        assert nodes[1].kind is NodeKind.SCHEMA
        assert nodes[1].details == "12"
        assert nodes[1].datasets == {"database": "sales"}

    def test_get_topics(self, conn):
        conn.execute.return_value = mapping_result(
            [
                {
                    "tables": 4,
                    "views": 1,
                    "functions": 2,
                    "procedures": 0,
                    "triggers": 1,
                    "events": 0,
                }
            ]
        )
        nodes = schemas.get_topics(conn, "sales")

        assert [n.label for n in nodes] == [
            "Tables",
            "Views",
            "Functions",
            "Procedures",
            "Triggers",
            "Events",
        ]
        assert nodes[0].datasets == {"tables": "sales"}
        assert nodes[0].details == "4"
        assert nodes[3].datasets == {"procedures": "sales"}
        assert len({n.name for n in nodes}) == len(nodes)
        params = conn.execute.call_args.args[1]
        assert params == {"schema": "sales"}

    def test_table_count_excludes_views(self, conn):
        conn.execute.return_value = mapping_result([])
        schemas.get_schemas(conn)
        sql = str(conn.execute.call_args.args[0])
        assert "TABLE_TYPE = 'BASE TABLE'" in sql

    def test_refresh_missing_schema(self, conn):
        conn.execute.return_value = mapping_result([])
        assert schemas.refresh_schema(conn, "gone") is None


class TestColumns:
    @pytest.mark.parametrize(
        "key, is_foreign, expected",
        [
            ("PRI", 0, ColumnKey.PRIMARY),
            ("PRI", 1, ColumnKey.PRIMARY),
            ("MUL", 1, ColumnKey.FOREIGN),
            ("MUL", 0, ColumnKey.PLAIN),
            ("", 0, ColumnKey.PLAIN),
        ],
    )
    def test_classify(self, key, is_foreign, expected):
        assert classify(key, is_foreign) is expected


class TestTables:
    def test_get_tables_with_column_children(self, conn):
        conn.execute.side_effect = [
            mapping_result(
                [
                    _column("customers", "id", key="PRI"),
                    _column("orders", "id", key="PRI"),
                    _column("orders", "customer_id", key="MUL", is_foreign=1),
                    _column("orders", "note", column_type="varchar(255)"),
                ]
            ),
            mapping_result(
                [
                    {"name": "customers", "row_estimate": 10, "engine": "InnoDB"},
                    {"name": "orders", "row_estimate": None, "engine": "InnoDB"},
                ]
            ),
        ]

        nodes = tables.get_tables(conn, "sales")

        assert [n.name for n in nodes] == ["sales.customers", "sales.orders"]
        customers, orders = nodes
        assert customers.details == "~10 rows"
        assert orders.details == "InnoDB"
        assert orders.datasets == {"schema": "sales", "table": "orders"}
        assert [a.name for a in orders.actions] == ["structure"]
        assert [c.icon for c in orders.children] == ["icon-pk", "icon-fk", "icon-field"]
        assert orders.children[2].details == "varchar(255)"
        assert orders.children[1].column_key is ColumnKey.FOREIGN

    def test_get_content_runs_bounded_preview(self, conn):
        result = MagicMock()
        result.returns_rows = True
        result.cursor.description = [("id", FIELD_TYPE.LONG)]
        result.fetchall.return_value = [(1,), (2,)]
        conn.exec_driver_sql.return_value = result

        preview = tables.get_content(conn, "sales", "orders", 50)

        conn.exec_driver_sql.assert_called_once_with("SELECT * FROM `sales`.`orders` LIMIT 50")
        assert preview.query == "SELECT * FROM `sales`.`orders` LIMIT 50"
        assert preview.data == [[1], [2]]

    def test_get_structure(self, conn):
        conn.exec_driver_sql.return_value = show_create_result(
            {"Table": "orders", "Create Table": "CREATE TABLE `orders` (...)"}
        )
        result = tables.get_structure(conn, "sales", "orders")
        assert result.is_structure
        assert result.query == "CREATE TABLE `orders` (...)"
        conn.exec_driver_sql.assert_called_once_with("SHOW CREATE TABLE `sales`.`orders`")

    def test_structure_of_percent_identifier(self, conn):
        conn.dialect.paramstyle = "pyformat"
        conn.exec_driver_sql.return_value = show_create_result({"Create Table": "CREATE ..."})

        tables.get_structure(conn, "sales", "50%_off")

        submitted = conn.exec_driver_sql.call_args.args[0]
        bound = Cursor(MagicMock()).mogrify(submitted, {})
        assert bound == "SHOW CREATE TABLE `sales`.`50%_off`"

    def test_missing_table_structure_fails(self, conn):
        conn.exec_driver_sql.side_effect = ProgrammingError(
            "SHOW CREATE TABLE", {}, Exception("Table 'sales.gone' doesn't exist")
        )
        with pytest.raises(QueryError, match="doesn't exist"):
            tables.get_structure(conn, "sales", "gone")

    def test_refresh_preserves_name_and_actions(self, conn):
        table_row = {"name": "orders", "row_estimate": 7, "engine": "InnoDB"}
        conn.execute.side_effect = [
            mapping_result([_column("orders", "id", key="PRI")]),
            mapping_result([table_row]),
            mapping_result([table_row]),
            mapping_result([_column("orders", "id", key="PRI")]),
        ]
        original = tables.get_tables(conn, "sales")[0]
        refreshed = tables.refresh_table(conn, "sales", "orders")

        assert refreshed.name == original.name
        assert refreshed.actions == original.actions
        assert refreshed.children == original.children

    def test_refresh_missing_table(self, conn):
        conn.execute.return_value = mapping_result([])
        assert tables.refresh_table(conn, "sales", "gone") is None


class TestViews:
    def test_get_views(self, conn):
        conn.execute.side_effect = [
            mapping_result([_column("v_orders", "id")]),
            mapping_result([{"name": "v_orders", "updatable": "YES"}]),
        ]
        (node,) = views.get_views(conn, "sales")

        assert node.kind is NodeKind.VIEW
        assert node.datasets == {"schema": "sales", "view": "v_orders"}
        assert node.details == "updatable"
        assert [c.label for c in node.children] == ["id"]

    def test_get_structure(self, conn):
        conn.exec_driver_sql.return_value = show_create_result(
            {"View": "v_orders", "Create View": "CREATE VIEW `v_orders` AS select 1"}
        )
        assert views.get_structure(conn, "sales", "v_orders").query.startswith("CREATE VIEW")

    def test_refresh_missing_view(self, conn):
        conn.execute.return_value = mapping_result([])
        assert views.refresh_view(conn, "sales", "gone") is None


class TestRoutines:
    def test_functions_and_procedures_use_their_own_source(self, conn):
        conn.execute.return_value = mapping_result([{"name": "total", "returns": "decimal(10,2)"}])

        (function,) = routines.get_routines(conn, "sales", RoutineKind.FUNCTION)
        assert conn.execute.call_args.args[1]["routine_type"] == "FUNCTION"

        (procedure,) = routines.get_routines(conn, "sales", RoutineKind.PROCEDURE)
        assert conn.execute.call_args.args[1]["routine_type"] == "PROCEDURE"

        assert function.icon == "icon-function"
        assert function.details == "decimal(10,2)"
        assert function.datasets == {
            "schema": "sales",
            "routine": "total",
            "routineType": "FUNCTION",
        }
        assert procedure.icon == "icon-procedure"
        assert procedure.details is None
        assert function.name != procedure.name

    @pytest.mark.parametrize(
        "kind, statement, column",
        [
            (RoutineKind.FUNCTION, "SHOW CREATE FUNCTION `sales`.`total`", "Create Function"),
            (RoutineKind.PROCEDURE, "SHOW CREATE PROCEDURE `sales`.`total`", "Create Procedure"),
        ],
    )
    def test_get_content(self, conn, kind, statement, column):
        conn.exec_driver_sql.return_value = show_create_result({column: "CREATE ... total"})
        result = routines.get_content(conn, "sales", "total", kind)
        conn.exec_driver_sql.assert_called_once_with(statement)
        assert result.query == "CREATE ... total"

    def test_definition_hidden_by_privileges(self, conn):
        conn.exec_driver_sql.return_value = show_create_result({"Create Function": None})
        assert routines.get_content(conn, "sales", "total", RoutineKind.FUNCTION).query == ""

    def test_refresh_missing_routine(self, conn):
        conn.execute.return_value = mapping_result([])
        assert routines.refresh_routine(conn, "sales", "gone", RoutineKind.FUNCTION) is None


class TestTriggersAndEvents:
    def test_get_triggers(self, conn):
        conn.execute.return_value = mapping_result(
            [{"name": "trg_audit", "timing": "AFTER", "event": "INSERT", "table_name": "orders"}]
        )
        (node,) = triggers.get_triggers(conn, "sales")
        assert node.details == "AFTER INSERT ON orders"
        assert node.datasets == {"schema": "sales", "trigger": "trg_audit"}
        assert [a.name for a in node.actions] == ["definition"]

    def test_trigger_content(self, conn):
        conn.exec_driver_sql.return_value = show_create_result(
            {"Trigger": "trg_audit", "SQL Original Statement": "CREATE TRIGGER trg_audit ..."}
        )
        assert triggers.get_content(conn, "sales", "trg_audit").query.startswith("CREATE TRIGGER")

    def test_get_events(self, conn):
        conn.execute.return_value = mapping_result(
            [{"name": "nightly", "event_type": "RECURRING", "status": "ENABLED"}]
        )
        (node,) = events.get_events(conn, "sales")
        assert node.kind is NodeKind.EVENT
        assert node.details == "recurring enabled"

    def test_event_content(self, conn):
        conn.exec_driver_sql.return_value = show_create_result(
            {"Event": "nightly", "Create Event": "CREATE EVENT nightly ..."}
        )
        assert events.get_content(conn, "sales", "nightly").query == "CREATE EVENT nightly ..."

    def test_refresh_missing_event_and_trigger(self, conn):
        conn.execute.return_value = mapping_result([])
        assert events.refresh_event(conn, "sales", "gone") is None
        assert triggers.refresh_trigger(conn, "sales", "gone") is None
