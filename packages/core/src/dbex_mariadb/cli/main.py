"""Click command group for dbex-mariadb.

Commands stay thin: they build an ExplorerService and print what it
returns.
"""

import sys

import click
from rich.table import Table
from rich.tree import Tree

from dbex_mariadb.cli.utils import (
    _get_cli_version,
    configure_logging,
    console,
    notify,
    resolve_connection,
)
from dbex_mariadb.config import get_settings, load_connections
from dbex_mariadb.requests import SchemaList, SchemaTopics, TableList
from dbex_mariadb.service import ExplorerService
from dbex_mariadb_models import ResultSet, TreeNode


def _build_service() -> ExplorerService:
    settings = get_settings()
    configure_logging(settings)
    return ExplorerService(settings, notify=notify)


def _add_nodes(parent: Tree, nodes: list[TreeNode]) -> None:
    for node in nodes:
        label = f"[cyan]{node.label}[/cyan]"
        if node.details:
            label += f" [dim]{node.details}[/dim]"
        branch = parent.add(label)
        if node.children:
            _add_nodes(branch, node.children)


def _print_result(result: ResultSet) -> None:
    if result.is_mutation:
        console.print(f"[green]✓ {result.records_affected} row(s) affected[/green]")
        return
    if result.is_structure:
        console.print(result.query)
        return

    table = Table(show_header=True)
    for column in result.columns:
        table.add_column(f"{column.name} [dim]{column.type.value}[/dim]")
    for row in result.data:
        table.add_row(*["[dim]NULL[/dim]" if v is None else str(v) for v in row])
    console.print(table)
    console.print(f"[dim]{len(result.data)} row(s)[/dim]")


@click.group()
@click.version_option(version=_get_cli_version())
def main():
    """dbex-mariadb - MariaDB backend for the database explorer."""
    pass


@main.command("list")
def list_cmd():
    """List the named connections."""
    settings = get_settings()
    try:
        connections = load_connections(settings.connections_file)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not connections:
        console.print(f"[dim]No connections configured in {settings.connections_file}.[/dim]")
        return

    table = Table(title="Connections", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Host")
    table.add_column("User")
    table.add_column("Database")
    for name, fields in connections.items():
        table.add_row(name, f"{fields.host}:{fields.port}", fields.user, fields.database or "-")
    console.print(table)


@main.command()
@click.argument("name")
def ping(name: str):
    """Test the connection NAME."""
    settings = get_settings()
    fields = resolve_connection(settings, name)
    status = _build_service().test_connection(fields)
    if status["connected"]:
        console.print(f"[green]✓ Connected[/green] [dim]{status['server_version']}[/dim]")
    else:
        console.print(f"[red]✗ {status['error']}[/red]")
        sys.exit(1)


@main.command()
@click.argument("name")
@click.argument("schema", default=None, required=False)
def tree(name: str, schema: str | None):
    """Print the schemas of NAME, or the objects of one SCHEMA."""
    settings = get_settings()
    fields = resolve_connection(settings, name)
    service = _build_service()

    try:
        if schema is None:
            outcome = service.double_click(name, SchemaList(), fields)
            root = Tree(f"[bold]{name}[/bold]")
            if outcome.succeeded:
                _add_nodes(root, outcome.value or [])
        else:
            outcome = service.double_click(name, SchemaTopics(schema), fields)
            root = Tree(f"[bold]{schema}[/bold]")
            if outcome.succeeded:
                _add_nodes(root, outcome.value or [])
                tables = service.double_click(name, TableList(schema), fields)
                if tables.succeeded and tables.value:
                    _add_nodes(root.children[0], tables.value)
    finally:
        service.shutdown()

    if not outcome.succeeded:
        sys.exit(1)
    console.print(root)


@main.command()
@click.argument("name")
@click.argument("sql")
def query(name: str, sql: str):
    """Run SQL on the connection NAME."""
    settings = get_settings()
    fields = resolve_connection(settings, name)
    service = _build_service()
    try:
        outcome = service.execute_query("", sql, name, fields)
    finally:
        service.shutdown()

    if not outcome.succeeded:
        sys.exit(1)
    _print_result(outcome.value)
