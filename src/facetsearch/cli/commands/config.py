"""
Config Commands

Create, validate and describe facetsearch configuration files.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from facetsearch.cli.utils import console, print_error
from facetsearch.core.config import ConfigManager
from facetsearch.core.exceptions import FacetSearchError

app = typer.Typer(
    help="Manage facetsearch configuration files",
    no_args_is_help=True,
)

PROFILES = ("default", "directory")


@app.command("init")
def config_init(
    output: Annotated[str, typer.Argument(help="Configuration file to create")] = "facetsearch.yaml",
    profile: Annotated[str, typer.Option("--profile", "-p", help="Profile: default or directory")] = "default",
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing file")] = False,
):
    """
    Create an example configuration file.

    [bold cyan]Examples:[/bold cyan]

    • Defaults: [green]facetsearch config init[/green]
    • With sample filters and terms: [green]facetsearch config init --profile directory[/green]
    """
    if profile not in PROFILES:
        console.print(f"[red]Unknown profile '{profile}'. Choose from: {', '.join(PROFILES)}[/red]")
        raise typer.Exit(1)

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[red]{output_path} already exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    ConfigManager().create_example_config(output_path, profile=profile)
    console.print(f"[green]✓ Configuration written to {output_path}[/green]")


@app.command("validate")
def config_validate(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file path")] = None,
):
    """
    Validate a configuration file and report warnings.
    """
    config_manager = ConfigManager(config_file=config)
    try:
        app_config = config_manager.load_config()
    except FacetSearchError as e:
        print_error(e)
        raise typer.Exit(1)

    warnings = config_manager.validate_config(app_config)
    if warnings:
        console.print("[yellow]Configuration warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  • {warning}")
        raise typer.Exit(1)

    console.print(
        f"[green]✓ Configuration is valid[/green] "
        f"({len(app_config.search.filters)} filters, {len(app_config.terms)} terms)"
    )


@app.command("schema")
def config_schema(
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Write the schema to a file")] = None,
):
    """
    Print the JSON schema of the configuration file.
    """
    config_manager = ConfigManager()
    if output:
        config_manager.generate_schema(Path(output))
        console.print(f"[green]✓ Schema written to {output}[/green]")
        return

    typer.echo(json.dumps(config_manager.generate_schema(), indent=2))
