"""Shared helpers for the dbex-mariadb CLI."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from rich.console import Console

from dbex_mariadb.config import Settings, load_connections
from dbex_mariadb_models import ConnectionFields

console = Console()


def _get_cli_version() -> str:
    """Get installed package version.

    Falls back to "unknown" when package metadata isn't available
    (e.g. running from a source checkout without installation).
    """
    try:
        return version("dbex-mariadb")
    except PackageNotFoundError:
        return "unknown"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def notify(title: str, detail: str) -> None:
    """Notification hook printing to the console."""
    console.print(f"[red]{title}:[/red] {detail}")


def resolve_connection(settings: Settings, name: str) -> ConnectionFields:
    """Look up a named connection or exit with a message."""
    try:
        connections = load_connections(settings.connections_file)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    fields = connections.get(name)
    if fields is None:
        console.print(f"[red]Connection '{name}' not found in {settings.connections_file}.[/red]")
        console.print("[dim]Run 'dbex-mariadb list' to see available connections.[/dim]")
        sys.exit(1)
    return fields
