"""Session pool registry.

One SQLAlchemy engine (pool) per named session, created lazily on first
use and shared by every request for that session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from dbex_mariadb.config import Settings, get_settings
from dbex_mariadb.db.connection import (
    ConnectionFailedError,
    PoolNotFoundError,
    create_pool,
    driver_message,
)
from dbex_mariadb_models import ConnectionFields

logger = logging.getLogger(__name__)

R = TypeVar("R")

PoolFactory = Callable[[ConnectionFields, Settings], Engine]


class SessionPoolRegistry:
    """Registry of connection pools keyed by session name.

    Creation is not single-flight: if two first-use requests race, both
    create a pool and the last registration wins. The losing pool is
    disposed once it is replaced.
    """

    def __init__(
        self, settings: Settings | None = None, pool_factory: PoolFactory = create_pool
    ) -> None:
        self._settings = settings or get_settings()
        self._pool_factory = pool_factory
        self._pools: dict[str, Engine] = {}

    def __contains__(self, session: str) -> bool:
        return session in self._pools

    @property
    def sessions(self) -> list[str]:
        return sorted(self._pools)

    def get(self, session: str) -> Engine | None:
        return self._pools.get(session)

    def ensure(self, session: str, fields: ConnectionFields) -> Engine:
        """Return the pool for a session, creating it on first use.

        Raises:
            ConnectionFailedError: If the pool cannot be created
        """
        pool = self._pools.get(session)
        if pool is not None:
            return pool
        return self.create(session, fields)

    def create(self, session: str, fields: ConnectionFields) -> Engine:
        """Create a pool for a session, replacing any existing one.

        Raises:
            ConnectionFailedError: If the pool cannot be created
        """
        pool = self._pool_factory(fields, self._settings)
        previous = self._pools.get(session)
        self._pools[session] = pool
        if previous is not None and previous is not pool:
            logger.info(f"Replacing pool for session '{session}'")
            previous.dispose()
        return pool

    @contextmanager
    def connection(self, session: str) -> Iterator[Connection]:
        """Check out a connection and return it to the pool on every exit path.

        Raises:
            PoolNotFoundError: If no pool exists for the session
            ConnectionFailedError: If the pool cannot hand out a connection
        """
        pool = self._pools.get(session)
        if pool is None:
            raise PoolNotFoundError(session)

        try:
            conn = pool.connect()
        except SQLAlchemyError as e:
            raise ConnectionFailedError(f"Failed to connect: {driver_message(e)}") from e

        try:
            yield conn
        finally:
            conn.close()

    def with_connection(self, session: str, operation: Callable[[Connection], R]) -> R:
        """Run ``operation`` on a pooled connection of the session."""
        with self.connection(session) as conn:
            return operation(conn)

    def discard(self, session: str) -> bool:
        """Dispose and forget the pool of a session."""
        pool = self._pools.pop(session, None)
        if pool is None:
            return False
        pool.dispose()
        logger.info(f"Discarded pool for session '{session}'")
        return True

    def clear(self) -> None:
        """Dispose every pool."""
        for session in list(self._pools):
            self.discard(session)
