"""Shared fixtures: settings, connection fields and mock engines."""

from unittest.mock import MagicMock

import pytest

from dbex_mariadb.config import Settings, reset_settings
from dbex_mariadb_models import ConnectionFields


@pytest.fixture(autouse=True)
def clean_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(preview_limit=50, connections_file="/nonexistent/connections.yaml")


@pytest.fixture
def fields() -> ConnectionFields:
    return ConnectionFields(host="db.local", port="3306", user="app", password="secret")


def mapping_result(rows: list[dict]) -> MagicMock:
    """A mock SQLAlchemy result whose ``.mappings()`` yields ``rows``."""
    result = MagicMock()
    result.mappings.return_value = rows
    return result


def show_create_result(row: dict | None) -> MagicMock:
    """A mock result of ``SHOW CREATE ...``."""
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    return result


class FakeEngine:
    """Engine stand-in counting connection check-outs and returns."""

    def __init__(self, conn: MagicMock | None = None) -> None:
        self.conn = conn or MagicMock()
        self.conn.__enter__.return_value = self.conn
        self.conn.close.side_effect = self._release
        self.acquired = 0
        self.released = 0
        self.disposed = False
        self.fail_connect: Exception | None = None

    def _release(self) -> None:
        self.released += 1

    def connect(self) -> MagicMock:
        if self.fail_connect is not None:
            raise self.fail_connect
        self.acquired += 1
        return self.conn

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def pool_factory(engine: FakeEngine) -> MagicMock:
    return MagicMock(return_value=engine)
