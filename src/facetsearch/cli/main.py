#!/usr/bin/env python3
"""
facetsearch CLI Main Application

Typer-based command-line interface for inspecting filters, composing
queries and managing configuration.
"""

from typing import Optional

import typer
from rich.console import Console

from facetsearch.cli import __version__
from facetsearch.cli.commands import config, search

console = Console()

# Create main Typer application
app = typer.Typer(
    name="facetsearch",
    help="Faceted filter and query composition engine",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Add subcommands
app.command("filters", help="List registered filters")(search.list_filters)
app.command("compose", help="Compose the listing query for request parameters")(search.compose)
app.add_typer(config.app, name="config", help="Manage configuration files")


def version_callback(value: bool):
    """Show version information."""
    if value:
        console.print(f"[bold cyan]facetsearch[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit"
    ),
):
    """
    facetsearch - faceted filters composed into one listing query

    [bold]Quick Start:[/bold]

    • Show filters: [cyan]facetsearch filters[/cyan]
    • Compose a query: [cyan]facetsearch compose -p q_keyword=pizza[/cyan]
    • Create a config file: [cyan]facetsearch config init[/cyan]
    """


def main():
    """Entry point for the facetsearch console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
