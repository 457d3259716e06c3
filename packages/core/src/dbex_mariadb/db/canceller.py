"""Best-effort cancellation of running queries.

The server has no notion of the client's request ids, so a running query
is found again by looking for a process of the same user whose current
statement text is exactly the recorded one. Two identical statements
running concurrently for one user cannot be told apart; the first
process found is killed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import Connection, Engine, text
from sqlalchemy.exc import SQLAlchemyError

from dbex_mariadb.config import Settings, get_settings
from dbex_mariadb.db.connection import DatabaseError, build_engine
from dbex_mariadb_models import ConnectionFields

logger = logging.getLogger(__name__)

EngineFactory = Callable[[ConnectionFields, Settings], Engine]

PROCESS_QUERY = text(
    "SELECT ID, INFO FROM information_schema.PROCESSLIST "
    "WHERE USER = :user AND ID <> CONNECTION_ID() ORDER BY ID"
)


def _single_use_engine(fields: ConnectionFields, settings: Settings) -> Engine:
    return build_engine(fields, settings, pooled=False)


@dataclass(frozen=True)
class RunningQuery:
    """The last statement submitted under a request id."""

    request_id: str
    sql: str
    session: str


def find_process(conn: Connection, user: str, sql: str) -> int | None:
    """Return the id of the first process of ``user`` running exactly ``sql``."""
    for row in conn.execute(PROCESS_QUERY, {"user": user}):
        if row[1] == sql:
            return int(row[0])
    return None


class QueryCanceller:
    """Tracks running queries by request id and kills them on request."""

    def __init__(
        self, settings: Settings | None = None, engine_factory: EngineFactory = _single_use_engine
    ) -> None:
        self._settings = settings or get_settings()
        self._engine_factory = engine_factory
        self._running: dict[str, RunningQuery] = {}

    def record(self, request_id: str, sql: str, session: str) -> None:
        """Remember the statement submitted under a request id (last one wins)."""
        self._running[request_id] = RunningQuery(request_id, sql, session)

    def get(self, request_id: str) -> RunningQuery | None:
        return self._running.get(request_id)

    def forget(self, request_id: str, sql: str | None = None) -> None:
        """Drop a finished query, unless a newer submission replaced it."""
        entry = self._running.get(request_id)
        if entry is None:
            return
        if sql is None or entry.sql == sql:
            del self._running[request_id]

    def clear(self) -> None:
        self._running.clear()

    def cancel(self, request_id: str, fields: ConnectionFields) -> bool:
        """Try to stop the query recorded under ``request_id``.

        Never raises. Returns True only when a KILL was issued. A query that
        already finished is a silent no-op.
        """
        entry = self._running.pop(request_id, None)
        if entry is None or not entry.sql:
            logger.info(f"No running query recorded for request '{request_id}'")
            return False

        try:
            engine = self._engine_factory(fields, self._settings)
        except DatabaseError as e:
            logger.warning(f"Cannot cancel request '{request_id}': {e}")
            return False

        try:
            with engine.connect() as conn:
                process_id = find_process(conn, fields.user, entry.sql)
                if process_id is None:
                    logger.info(f"Query for request '{request_id}' is no longer running")
                    return False
                conn.exec_driver_sql(f"KILL QUERY {process_id}")
        except SQLAlchemyError as e:
            logger.warning(f"Failed to cancel request '{request_id}': {e}")
            return False
        finally:
            engine.dispose()

        logger.info(f"Killed process {process_id} for request '{request_id}'")
        return True
