"""
Search Commands

Inspect the registered filters and compose a query from request parameters
the same way a search request would.
"""

import json
from typing import Annotated, Any, Dict, List, Optional

import typer
from rich.table import Table

from facetsearch.bootstrap import SearchContext, build_context
from facetsearch.cli.utils import (
    build_cli_args,
    console,
    load_config_from_cli,
    parse_params,
    print_config_summary,
    print_error,
    print_header,
)
from facetsearch.core.exceptions import FacetSearchError
from facetsearch.filters.factory import FilterFactory


def _load_context(
    config: Optional[str],
    prefix: Optional[str],
    no_default_filters: Optional[bool],
    show_warnings: bool = True,
) -> SearchContext:
    cli_args = build_cli_args(prefix=prefix, no_default_filters=no_default_filters)
    app_config = load_config_from_cli(config_file=config, cli_args=cli_args, show_warnings=show_warnings)
    try:
        return build_context(app_config)
    except FacetSearchError as e:
        print_error(e)
        raise typer.Exit(1)


def list_filters(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file path")] = None,
    prefix: Annotated[Optional[str], typer.Option("--prefix", help="Request parameter prefix")] = None,
    no_default_filters: Annotated[Optional[bool], typer.Option(
        "--no-default-filters/--default-filters", help="Skip the keyword, category and tag filters"
    )] = None,
    include_inactive: Annotated[bool, typer.Option("--all", "-a", help="Include disabled filters")] = False,
    types: Annotated[bool, typer.Option("--types", help="List available filter types instead")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show the configuration summary")] = False,
):
    """
    List registered filters in priority order.

    [bold cyan]Examples:[/bold cyan]

    • Registered filters: [green]facetsearch filters[/green]
    • Available filter types: [green]facetsearch filters --types[/green]
    """
    if types:
        _print_filter_types()
        return

    context = _load_context(config, prefix, no_default_filters)
    if verbose:
        print_config_summary(context.config)

    filters = context.registry.get_all(active_only=not include_inactive)

    table = Table(title=f"Registered Filters ({len(filters)})", show_header=True, header_style="bold cyan")
    table.add_column("Priority", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Label")
    table.add_column("Source")
    table.add_column("Parameter", style="green")

    for filter_instance in filters:
        table.add_row(
            str(filter_instance.priority),
            filter_instance.name,
            filter_instance.kind,
            filter_instance.label,
            filter_instance.source,
            filter_instance.url_param,
        )

    console.print(table)


def _print_filter_types() -> None:
    table = Table(title="Available Filter Types", show_header=True, header_style="bold cyan")
    table.add_column("Type", style="cyan")
    table.add_column("Kind")
    table.add_column("Class")
    table.add_column("Description")

    for filter_type, info in FilterFactory.get_available_filters().items():
        table.add_row(filter_type, info['kind'], info['class'], info['description'])

    console.print(table)


def compose(
    param: Annotated[Optional[List[str]], typer.Option(
        "--param", "-p", help="Request parameter as key=value (repeatable)"
    )] = None,
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Configuration file path")] = None,
    prefix: Annotated[Optional[str], typer.Option("--prefix", help="Request parameter prefix")] = None,
    no_default_filters: Annotated[Optional[bool], typer.Option(
        "--no-default-filters/--default-filters", help="Skip the keyword, category and tag filters"
    )] = None,
    base_url: Annotated[str, typer.Option("--base-url", help="Base URL for remove-filter links")] = "/listings/",
    as_json: Annotated[bool, typer.Option("--json", help="Print machine-readable JSON only")] = False,
):
    """
    Compose the listing query for a set of request parameters.

    [bold cyan]Examples:[/bold cyan]

    • Keyword and category: [green]facetsearch compose -p q_keyword=pizza -p q_category=3[/green]
    • Several tags: [green]facetsearch compose -p "q_tag[]=4" -p "q_tag[]=7"[/green]
    • Machine-readable: [green]facetsearch compose -p q_keyword=pizza --json[/green]
    """
    params = parse_params(param)
    context = _load_context(config, prefix, no_default_filters, show_warnings=not as_json)

    query = context.search_query.build_query(params)
    chips = context.renderer.render_active_filters(params, base_url)

    result: Dict[str, Any] = {
        'params': params,
        'active_filters': [
            {
                'name': chip.name,
                'label': chip.label,
                'value': chip.entry.value,
                'display_value': chip.display_value,
                'remove_url': chip.remove_url,
            }
            for chip in chips
        ],
        'query': query.to_dict(),
    }

    if as_json:
        typer.echo(json.dumps(result, indent=2, default=str))
        return

    print_header("Composed Query", f"{len(params)} request parameters")

    if chips:
        table = Table(title="Active Filters", show_header=True, header_style="bold cyan")
        table.add_column("Filter", style="cyan")
        table.add_column("Value")
        table.add_column("Remove URL", style="dim")
        for chip in chips:
            table.add_row(chip.label, chip.display_value, chip.remove_url)
        console.print(table)
    else:
        console.print("[dim]No active filters[/dim]")

    console.print_json(json.dumps(result['query'], default=str))
