"""Tests for the dbex-mariadb command line."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from dbex_mariadb.cli.main import main
from dbex_mariadb.service import Outcome
from dbex_mariadb_models import ColumnType, NodeKind, ResultColumn, ResultSet, TreeNode

CONNECTIONS_YAML = """\
local:
  host: db.local
  port: 3306
  user: app
  password: secret
  database: sales
"""


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def connections_file(tmp_path, monkeypatch):
    path = tmp_path / "connections.yaml"
    path.write_text(CONNECTIONS_YAML)
    monkeypatch.setenv("DBEX_CONNECTIONS_FILE", str(path))
    return path


@pytest.fixture()
def service():
    with patch("dbex_mariadb.cli.main.ExplorerService") as service_cls:
        yield service_cls.return_value


class TestMainGroup:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "MariaDB" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0

    def test_commands_registered(self):
        assert {"list", "ping", "tree", "query"} <= set(main.commands)


class TestList:
    def test_lists_connections(self, runner, connections_file):
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "local" in result.output
        assert "db.local:3306" in result.output

    def test_no_connections(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("DBEX_CONNECTIONS_FILE", str(tmp_path / "missing.yaml"))
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "No connections configured" in result.output


class TestPing:
    def test_connected(self, runner, connections_file, service):
        service.test_connection.return_value = {
            "connected": True,
            "server_version": "11.4.2-MariaDB",
            "error": None,
        }
        result = runner.invoke(main, ["ping", "local"])
        assert result.exit_code == 0
        assert "11.4.2-MariaDB" in result.output

    def test_unknown_connection(self, runner, connections_file, service):
        result = runner.invoke(main, ["ping", "elsewhere"])
        assert result.exit_code == 1
        assert "not found" in result.output
        service.test_connection.assert_not_called()


class TestQuery:
    def test_prints_rows(self, runner, connections_file, service):
        service.execute_query.return_value = Outcome.ok(
            ResultSet.tabular(
                [ResultColumn(name="id", type=ColumnType.NUMBER)], [[1], [None]]
            )
        )
        result = runner.invoke(main, ["query", "local", "SELECT id FROM t"])

        assert result.exit_code == 0
        assert "2 row(s)" in result.output
        assert "NULL" in result.output
        args = service.execute_query.call_args.args
        assert args[1:3] == ("SELECT id FROM t", "local")
        assert args[3].database == "sales"
        service.shutdown.assert_called_once()

    def test_prints_affected_rows(self, runner, connections_file, service):
        service.execute_query.return_value = Outcome.ok(ResultSet.affected(4))
        result = runner.invoke(main, ["query", "local", "DELETE FROM t"])
        assert result.exit_code == 0
        assert "4 row(s) affected" in result.output

    def test_failure_exits_nonzero(self, runner, connections_file, service):
        service.execute_query.return_value = Outcome.failed(MagicMock())
        result = runner.invoke(main, ["query", "local", "SELEC"])
        assert result.exit_code == 1


class TestTree:
    def test_schemas(self, runner, connections_file, service):
        service.double_click.return_value = Outcome.ok(
            [TreeNode(label="sales", name="sales", kind=NodeKind.SCHEMA, icon="icon-database")]
        )
        result = runner.invoke(main, ["tree", "local"])
        assert result.exit_code == 0
        assert "sales" in result.output
