"""Explorer service: the entry points a host UI calls.

The service owns the session pool registry and the running-query registry.
Every entry point returns an :class:`Outcome` instead of invoking a
completion callback: a value, a failure, or neither (nothing to do).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from dbex_mariadb.config import Settings, get_settings
from dbex_mariadb.db import connection as db_connection
from dbex_mariadb.db.canceller import QueryCanceller
from dbex_mariadb.db.connection import ConnectionFailedError, DatabaseError, QueryError
from dbex_mariadb.db.executor import run_query
from dbex_mariadb.db.pools import SessionPoolRegistry
from dbex_mariadb.requests import Request, parse_request
from dbex_mariadb.router import RequestRouter
from dbex_mariadb_models import ConnectionFields

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]

Context = Request | Mapping[str, Any] | None


def log_notification(title: str, detail: str) -> None:
    """Default notification hook."""
    logger.error(f"{title}: {detail}")


@dataclass(frozen=True)
class Outcome:
    """Result channel of a service call. Never both value and error."""

    value: Any = None
    error: DatabaseError | None = None

    def __post_init__(self) -> None:
        if self.value is not None and self.error is not None:
            raise ValueError("Outcome cannot carry both a value and an error")

    @classmethod
    def ok(cls, value: Any) -> Outcome:
        return cls(value=value)

    @classmethod
    def failed(cls, error: DatabaseError) -> Outcome:
        return cls(error=error)

    @classmethod
    def empty(cls) -> Outcome:
        return cls()

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.value is None and self.error is None


class ExplorerService:
    """Backend of the database explorer for one process."""

    def __init__(
        self,
        settings: Settings | None = None,
        notify: Notifier | None = None,
        registry: SessionPoolRegistry | None = None,
        canceller: QueryCanceller | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._notify = notify or log_notification
        self.registry = registry or SessionPoolRegistry(self._settings)
        self.canceller = canceller or QueryCanceller(self._settings)
        self.router = RequestRouter(self.registry, self._settings)

    def _resolve(
        self, context: Context, fields: ConnectionFields | None
    ) -> tuple[Request | None, ConnectionFields]:
        if context is None or isinstance(context, Mapping):
            request = parse_request(context)
            if fields is None:
                fields = ConnectionFields.from_datasets(context or {})
            return request, fields
        return context, fields or ConnectionFields()

    def _guard(self, call: Callable[[], Any]) -> Outcome:
        try:
            value = call()
        except ConnectionFailedError as e:
            self._notify("Connection failed", str(e))
            return Outcome.failed(e)
        except QueryError as e:
            self._notify("Query failed", e.detail)
            return Outcome.failed(e)
        except DatabaseError as e:
            self._notify("Database error", str(e))
            return Outcome.failed(e)
        return Outcome.ok(value)

    def test_connection(self, fields: ConnectionFields) -> dict:
        """Check connection fields without registering a session."""
        if not fields.is_complete():
            return {
                "connected": False,
                "server_version": None,
                "error": str(db_connection.IncompleteFieldsError()),
            }
        return db_connection.test_connection(fields, self._settings)

    def double_click(
        self, session: str, context: Context, fields: ConnectionFields | None = None
    ) -> Outcome:
        """Open a node: list children, preview data or show a definition."""
        request, fields = self._resolve(context, fields)
        if request is None:
            return Outcome.empty()
        return self._guard(lambda: self.router.dispatch(session, request, fields))

    def action_click(
        self,
        action: str,
        session: str,
        context: Context,
        fields: ConnectionFields | None = None,
    ) -> Outcome:
        """Run a node action (structure / definition)."""
        request, fields = self._resolve(context, fields)
        return self._guard(lambda: self.router.dispatch_action(session, action, request, fields))

    def refresh(
        self, session: str, context: Context, fields: ConnectionFields | None = None
    ) -> Outcome:
        """Rebuild a node from current data. An empty outcome means it is gone."""
        request, fields = self._resolve(context, fields)
        return self._guard(lambda: self.router.dispatch_refresh(session, request, fields))

    def execute_query(
        self, request_id: str, sql: str, session: str, fields: ConnectionFields
    ) -> Outcome:
        """Run an ad-hoc statement from the editor.

        ``request_id`` may be empty; such queries cannot be stopped.
        """
        if request_id:
            self.canceller.record(request_id, sql, session)
        try:
            return self._guard(
                lambda: self.router.run(session, fields, lambda conn: run_query(conn, sql))
            )
        finally:
            if request_id:
                self.canceller.forget(request_id, sql)

    def stop_query(self, request_id: str, fields: ConnectionFields) -> None:
        """Best-effort cancellation. Failures are logged, never reported."""
        self.canceller.cancel(request_id, fields)

    def shutdown(self) -> None:
        """Dispose every pool and forget running queries."""
        self.registry.clear()
        self.canceller.clear()
