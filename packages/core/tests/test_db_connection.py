"""Tests for engine creation and connection checks."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool

from dbex_mariadb.db import connection as db_connection
from dbex_mariadb.db.connection import (
    ConnectionFailedError,
    IncompleteFieldsError,
    build_engine,
    create_pool,
    driver_message,
)
from dbex_mariadb_models import ConnectionFields


def _operational_error(message: str = "Can't connect to server") -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception(message))


class TestBuildEngine:
    def test_incomplete_fields(self, settings):
        with pytest.raises(IncompleteFieldsError, match="necessary fields"):
            build_engine(ConnectionFields(host="h", user="u"), settings)

    def test_bad_port(self, settings):
        fields = ConnectionFields(host="h", port="not-a-port", user="u")
        with pytest.raises(ConnectionFailedError, match="Invalid connection settings"):
            build_engine(fields, settings)

    def test_pooled_engine_options(self, settings, fields):
        with patch("dbex_mariadb.db.connection.create_engine") as mock_create:
            build_engine(fields, settings)

        url, = mock_create.call_args.args
        kwargs = mock_create.call_args.kwargs
        assert url.drivername == "mysql+pymysql"
        assert kwargs["isolation_level"] == "AUTOCOMMIT"
        assert kwargs["pool_size"] == settings.pool_size
        assert kwargs["pool_pre_ping"] is True
        assert kwargs["connect_args"] == {"connect_timeout": settings.connect_timeout}
        assert "poolclass" not in kwargs

    def test_single_use_engine(self, settings, fields):
        with patch("dbex_mariadb.db.connection.create_engine") as mock_create:
            build_engine(fields, settings, pooled=False)

        kwargs = mock_create.call_args.kwargs
        assert kwargs["poolclass"] is NullPool
        assert "pool_size" not in kwargs


class TestCreatePool:
    def test_returns_verified_engine(self, settings, fields):
        engine = MagicMock()
        with patch("dbex_mariadb.db.connection.create_engine", return_value=engine):
            assert create_pool(fields, settings) is engine
        engine.connect.assert_called_once()
        engine.dispose.assert_not_called()

    def test_unreachable_host(self, settings, fields):
        engine = MagicMock()
        engine.connect.side_effect = _operational_error()
        with patch("dbex_mariadb.db.connection.create_engine", return_value=engine):
            with pytest.raises(ConnectionFailedError, match="Can't connect to server"):
                create_pool(fields, settings)
        engine.dispose.assert_called_once()


class TestDriverMessage:
    def test_uses_original_driver_error(self):
        assert driver_message(_operational_error("Access denied")) == "Access denied"


class TestTestConnection:
    def test_incomplete_fields(self, settings):
        status = db_connection.test_connection(ConnectionFields(host="h"), settings)
        assert status["connected"] is False
        assert "necessary fields" in status["error"]

    def test_connected(self, settings, fields):
        engine = MagicMock()
        conn = engine.connect.return_value.__enter__.return_value
        conn.execute.return_value.scalar.return_value = "10.11.6-MariaDB"
        with patch("dbex_mariadb.db.connection.create_engine", return_value=engine):
            status = db_connection.test_connection(fields, settings)

        assert status == {"connected": True, "server_version": "10.11.6-MariaDB", "error": None}
        engine.dispose.assert_called_once()

    def test_failure_reported_not_raised(self, settings, fields):
        engine = MagicMock()
        engine.connect.side_effect = _operational_error("Access denied for user 'app'")
        with patch("dbex_mariadb.db.connection.create_engine", return_value=engine):
            status = db_connection.test_connection(fields, settings)

        assert status["connected"] is False
        assert "Access denied" in status["error"]
        engine.dispose.assert_called_once()
