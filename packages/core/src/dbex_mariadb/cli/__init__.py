"""dbex-mariadb CLI package."""

from dbex_mariadb.cli.main import main
from dbex_mariadb.cli.utils import console

__all__ = ["console", "main"]
