"""Request routing.

Maps a request kind onto the catalog operation that serves it and runs the
operation on a pooled connection of the session. A missing pool is created
from the connection fields and the operation retried once.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar, assert_never

from sqlalchemy import Connection

from dbex_mariadb.catalog import events, nodes, routines, schemas, tables, triggers, views
from dbex_mariadb.config import Settings, get_settings
from dbex_mariadb.db.connection import PoolNotFoundError
from dbex_mariadb.db.pools import SessionPoolRegistry
from dbex_mariadb.requests import (
    EventItem,
    EventList,
    Request,
    RoutineItem,
    RoutineList,
    SchemaList,
    SchemaTopics,
    TableItem,
    TableList,
    TriggerItem,
    TriggerList,
    ViewItem,
    ViewList,
)
from dbex_mariadb_models import ConnectionFields

logger = logging.getLogger(__name__)

R = TypeVar("R")

Handler = Callable[[Connection], Any]


class RequestRouter:
    """Selects and runs the catalog operation for a request."""

    def __init__(self, registry: SessionPoolRegistry, settings: Settings | None = None) -> None:
        self._registry = registry
        self._settings = settings or get_settings()

    def handler_for(self, request: Request) -> Handler:
        """Operation run when a node is opened (double-click)."""
        limit = self._settings.preview_limit
        match request:
            case SchemaList():
                return schemas.get_schemas
            case SchemaTopics(schema=schema):
                return lambda conn: schemas.get_topics(conn, schema)
            case TableList(schema=schema):
                return lambda conn: tables.get_tables(conn, schema)
            case TableItem(schema=schema, table=table):
                return lambda conn: tables.get_content(conn, schema, table, limit)
            case ViewList(schema=schema):
                return lambda conn: views.get_views(conn, schema)
            case ViewItem(schema=schema, view=view):
                return lambda conn: views.get_content(conn, schema, view, limit)
            case RoutineList(schema=schema, kind=kind):
                return lambda conn: routines.get_routines(conn, schema, kind)
            case RoutineItem(schema=schema, name=name, kind=kind):
                return lambda conn: routines.get_content(conn, schema, name, kind)
            case EventList(schema=schema):
                return lambda conn: events.get_events(conn, schema)
            case EventItem(schema=schema, name=name):
                return lambda conn: events.get_content(conn, schema, name)
            case TriggerItem(schema=schema, name=name):
                return lambda conn: triggers.get_content(conn, schema, name)
            case TriggerList(schema=schema):
                return lambda conn: triggers.get_triggers(conn, schema)
            case _:
                assert_never(request)

    def action_handler_for(self, action: str, request: Request) -> Handler | None:
        """Operation behind a node action, or None if the node has no such action."""
        match action, request:
            case (nodes.STRUCTURE, TableItem(schema=schema, table=table)):
                return lambda conn: tables.get_structure(conn, schema, table)
            case (nodes.STRUCTURE, ViewItem(schema=schema, view=view)):
                return lambda conn: views.get_structure(conn, schema, view)
            case (nodes.DEFINITION, RoutineItem(schema=schema, name=name, kind=kind)):
                return lambda conn: routines.get_content(conn, schema, name, kind)
            case (nodes.DEFINITION, TriggerItem(schema=schema, name=name)):
                return lambda conn: triggers.get_content(conn, schema, name)
            case (nodes.DEFINITION, EventItem(schema=schema, name=name)):
                return lambda conn: events.get_content(conn, schema, name)
        return None

    def refresh_handler_for(self, request: Request) -> Handler | None:
        """Operation that rebuilds the node behind a request, if it can be rebuilt."""
        match request:
            case SchemaTopics(schema=schema):
                return lambda conn: schemas.refresh_schema(conn, schema)
            case TableItem(schema=schema, table=table):
                return lambda conn: tables.refresh_table(conn, schema, table)
            case ViewItem(schema=schema, view=view):
                return lambda conn: views.refresh_view(conn, schema, view)
            case RoutineItem(schema=schema, name=name, kind=kind):
                return lambda conn: routines.refresh_routine(conn, schema, name, kind)
            case TriggerItem(schema=schema, name=name):
                return lambda conn: triggers.refresh_trigger(conn, schema, name)
            case EventItem(schema=schema, name=name):
                return lambda conn: events.refresh_event(conn, schema, name)
        return None

    def run(
        self, session: str, fields: ConnectionFields, operation: Callable[[Connection], R]
    ) -> R:
        """Run an operation on the session, creating its pool if needed.

        Raises:
            ConnectionFailedError: If the pool cannot be created or used
            QueryError: If the operation's SQL fails
        """
        try:
            return self._registry.with_connection(session, operation)
        except PoolNotFoundError:
            logger.info(f"No pool for session '{session}', creating one")
            self._registry.create(session, fields)
            return self._registry.with_connection(session, operation)

    def dispatch(self, session: str, request: Request | None, fields: ConnectionFields) -> Any:
        """Run the open operation of a request; None when there is no request."""
        if request is None:
            logger.debug("No handler matches the context")
            return None
        logger.debug(f"Routing {request!r} for session '{session}'")
        return self.run(session, fields, self.handler_for(request))

    def dispatch_action(
        self, session: str, action: str, request: Request | None, fields: ConnectionFields
    ) -> Any:
        handler = self.action_handler_for(action, request) if request is not None else None
        if handler is None:
            logger.debug(f"No handler for action '{action}' on {request!r}")
            return None
        return self.run(session, fields, handler)

    def dispatch_refresh(
        self, session: str, request: Request | None, fields: ConnectionFields
    ) -> Any:
        handler = self.refresh_handler_for(request) if request is not None else None
        if handler is None:
            return None
        return self.run(session, fields, handler)
