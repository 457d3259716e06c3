"""Database connection management."""

import logging

from sqlalchemy import Connection, Engine, create_engine, text
from sqlalchemy.exc import ArgumentError, DBAPIError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from dbex_mariadb.config import Settings, get_settings
from dbex_mariadb_models import ConnectionFields

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Database connection or query error."""

    pass


class ConnectionFailedError(DatabaseError):
    """A pool or connection could not be established."""

    pass


class IncompleteFieldsError(ConnectionFailedError):
    """Host, port or user is missing."""

    def __init__(self) -> None:
        super().__init__("Some necessary fields are not filled. Please check again")


class PoolNotFoundError(DatabaseError):
    """No pool has been created for a session yet."""

    def __init__(self, session: str) -> None:
        super().__init__(f"Pool Not Exist: {session}")
        self.session = session


class QueryError(DatabaseError):
    """The server rejected or failed a statement."""

    def __init__(self, detail: str, sql: str) -> None:
        super().__init__(detail)
        self.detail = detail
        self.sql = sql


def driver_message(error: SQLAlchemyError) -> str:
    """Return the underlying driver message of a SQLAlchemy error."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


def driver_sql(conn: Connection, sql: str) -> str:
    """Prepare statement text for ``exec_driver_sql``.

    Format-style drivers (pymysql) interpolate the statement with the
    parameter mapping even when it is empty, so a literal ``%`` must be
    doubled to reach the server unchanged.
    """
    if conn.dialect.paramstyle in ("format", "pyformat"):
        return sql.replace("%", "%%")
    return sql


def build_engine(
    fields: ConnectionFields, settings: Settings | None = None, *, pooled: bool = True
) -> Engine:
    """Create a SQLAlchemy engine for connection fields.

    Engines run in autocommit mode: statements submitted from the editor
    take effect immediately, as in an interactive client.

    Args:
        fields: Connection fields of the session
        settings: Optional settings. If not provided, uses cached settings.
        pooled: Use a QueuePool. Single-use engines (cancellation) pass False.

    Raises:
        ConnectionFailedError: If the fields cannot form a valid URL
    """
    settings = settings or get_settings()

    if not fields.is_complete():
        raise IncompleteFieldsError()

    engine_kwargs = {
        "isolation_level": "AUTOCOMMIT",
        "connect_args": {"connect_timeout": settings.connect_timeout},
    }
    if pooled:
        engine_kwargs.update(
            {
                "pool_size": settings.pool_size,
                "max_overflow": settings.max_overflow,
                "pool_pre_ping": settings.pool_pre_ping,
                "pool_recycle": settings.pool_recycle,
            }
        )
    else:
        engine_kwargs["poolclass"] = NullPool

    try:
        return create_engine(fields.url(settings.driver), **engine_kwargs)
    except (ValueError, ArgumentError) as e:
        raise ConnectionFailedError(f"Invalid connection settings: {e}") from e


def create_pool(fields: ConnectionFields, settings: Settings | None = None) -> Engine:
    """Create a connection pool and prove it can hand out a connection.

    ``create_engine`` is lazy, so one connection is opened and returned
    straight away; unreachable hosts and rejected credentials fail here
    instead of on the first catalog request.

    Raises:
        ConnectionFailedError: If the driver cannot connect
    """
    engine = build_engine(fields, settings)
    try:
        with engine.connect():
            pass
    except SQLAlchemyError as e:
        engine.dispose()
        raise ConnectionFailedError(
            f"Failed to connect to {fields.host}:{fields.port}: {driver_message(e)}"
        ) from e

    logger.info(f"Created pool for {fields.user}@{fields.host}:{fields.port}")
    return engine


def test_connection(fields: ConnectionFields, settings: Settings | None = None) -> dict:
    """Test connection fields without registering a session.

    Returns:
        Dict with connection status and info
    """
    try:
        engine = build_engine(fields, settings, pooled=False)
    except DatabaseError as e:
        return {"connected": False, "server_version": None, "error": str(e)}

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            server_version = conn.execute(text("SELECT VERSION()")).scalar()
        return {"connected": True, "server_version": server_version, "error": None}
    except SQLAlchemyError as e:
        return {"connected": False, "server_version": None, "error": f"Connection failed: {e}"}
    finally:
        engine.dispose()
