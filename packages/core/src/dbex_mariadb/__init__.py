"""MariaDB backend for a database explorer."""

from dbex_mariadb.requests import Request, parse_request
from dbex_mariadb.service import ExplorerService, Outcome

__all__ = ["ExplorerService", "Outcome", "Request", "parse_request"]
