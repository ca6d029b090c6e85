"""
CLI Utilities

Shared utilities for CLI commands: configuration loading, logging setup,
request parameter parsing and output helpers.
"""

import logging
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from facetsearch.core.config import AppConfig, ConfigManager
from facetsearch.core.exceptions import FacetSearchError

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: AppConfig) -> None:
    """Configure root logging once, at the configured level."""
    logging.basicConfig(level=config.get_effective_log_level(), format=LOG_FORMAT)


def build_cli_args(**kwargs: Any) -> Dict[str, Any]:
    """Drop options the user did not set so they don't override the config."""
    return {key: value for key, value in kwargs.items() if value is not None}


def load_config_from_cli(
    config_file: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    show_warnings: bool = True,
) -> AppConfig:
    """
    Load configuration from CLI arguments with proper error handling.

    Args:
        config_file: Optional path to configuration file
        cli_args: Dictionary of CLI arguments to override config
        show_warnings: Print configuration warnings

    Returns:
        Validated AppConfig instance

    Raises:
        typer.Exit: If configuration is invalid
    """
    try:
        config_manager = ConfigManager(config_file=config_file)
        app_config = config_manager.load_config(cli_args=cli_args or {})
    except FacetSearchError as e:
        print_error(e)
        raise typer.Exit(1)

    setup_logging(app_config)

    # Show configuration warnings
    if show_warnings:
        warnings = config_manager.validate_config(app_config)
        if warnings:
            console.print("[yellow]Configuration warnings:[/yellow]")
            for warning in warnings:
                console.print(f"  • {warning}")
            console.print()

    return app_config


def parse_params(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """
    Parse ``key=value`` pairs into request parameters.

    Keys ending in ``[]`` and keys given more than once collect their values
    into a list, the way a browser posts multi-value fields.

    Raises:
        typer.BadParameter: If a pair has no ``=``
    """
    params: Dict[str, Any] = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'")
        key, value = pair.split('=', 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty parameter name in '{pair}'")

        if key.endswith('[]'):
            params.setdefault(key, []).append(value)
        elif key in params:
            existing = params[key]
            params[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


def print_header(title: str, subtitle: Optional[str] = None) -> None:
    """Print a formatted header for CLI output."""
    if subtitle:
        header_text = f"[bold cyan]{title}[/bold cyan]\n[dim]{subtitle}[/dim]"
    else:
        header_text = f"[bold cyan]{title}[/bold cyan]"

    console.print(Panel(header_text, border_style="cyan"))


def print_error(error: FacetSearchError) -> None:
    """Print a facetsearch error with its recovery suggestions."""
    console.print(Panel(
        error.get_user_message(),
        title=f"[red]{error.__class__.__name__}[/red]",
        border_style="red",
    ))


def print_config_summary(config: AppConfig) -> None:
    """
    Print a formatted summary of the search configuration.

    Args:
        config: AppConfig instance to summarize
    """
    table = Table(title="Configuration Summary", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="dim", width=24)
    table.add_column("Value", style="white", width=40)

    search = config.search
    table.add_row("Parameter prefix", search.param_prefix)
    table.add_row("Listing type", search.post_type)
    table.add_row("Per page", str(search.posts_per_page))
    table.add_row("Default filters", "✓ Enabled" if search.register_default_filters else "✗ Disabled")
    table.add_row("Configured filters", ", ".join(f.name for f in search.filters) or "None")
    table.add_row("Terms", str(len(config.terms)))
    table.add_row("Plugins", ", ".join(config.plugins) or "None")

    console.print(table)
    console.print()
