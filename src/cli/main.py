"""Command-line host for the geolocation filter."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from adapters.json_exporter import dumps_document, export_nodes_json
from adapters.node_loader import NodeFileError, extract_node_list, load_document, replace_node_list
from cli import doctor
from cli.ui_components import build_results_table, build_summary_panel, print_banner
from core.config import AppSettings
from core.domain.models import LookupOutcome, Node
from core.domain.provider import GeoProvider
from core.log import configure_logging
from core.services.geo_filter import FilterHooks, filter_nodes
from core.services.rate_scheduler import RateScheduler

app = typer.Typer(
    no_args_is_help=True,
    help="Annotate proxy node names with the location their server really resolves to.",
)
app.add_typer(doctor.app, name="doctor")

# UI goes to stderr; stdout is reserved for the JSON result.
_console = Console(stderr=True)


def load_settings(**overrides: Any) -> AppSettings:
    """Build settings, letting CLI flags win over env/.env values."""

    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return AppSettings(**values)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def relabel(
    input: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON file: a list of nodes or an object with a 'proxies' list.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the relabeled JSON here instead of stdout.",
    ),
    provider: Optional[GeoProvider] = typer.Option(
        None,
        "--provider",
        "-p",
        help="Lookup provider: ip-api | ipinfo",
    ),
    delay_ms: Optional[int] = typer.Option(
        None,
        "--delay-ms",
        min=1,
        help="Pause between lookups in milliseconds.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="No banner, progress or table; warnings only.",
    ),
) -> None:
    """Look up every node and rewrite its name with the real location."""

    settings = load_settings(provider=provider, request_delay_ms=delay_ms)
    configure_logging("WARNING" if quiet else settings.log_level, console=_console)

    try:
        document = load_document(input)
        nodes = extract_node_list(document)
    except NodeFileError as exc:
        raise typer.BadParameter(str(exc), param_hint="INPUT") from exc

    rows: list[tuple[Node, LookupOutcome]] = []

    if quiet:
        result = asyncio.run(filter_nodes(nodes, settings=settings))
    else:
        print_banner(_console)
        scheduler = RateScheduler.from_settings(settings)
        _console.print(build_summary_panel(scheduler.summarize(len(nodes)), scheduler.config, settings.provider))
        with Progress(
            TextColumn("[cyan]Looking up"),
            BarColumn(),
            MofNCompleteColumn(),
            console=_console,
            transient=True,
        ) as progress:
            task = progress.add_task("lookup", total=len(nodes))

            def on_outcome(_index: int, node: Node, outcome: LookupOutcome) -> None:
                rows.append((node, outcome))
                progress.advance(task)

            result = asyncio.run(filter_nodes(nodes, settings=settings, hooks=FilterHooks(outcome=on_outcome)))

    relabeled = replace_node_list(document, result)
    if output is not None:
        path = export_nodes_json(document=relabeled, output_path=output)
        if not quiet:
            _console.print(f"[green]Saved relabeled nodes to:[/green] {path}")
    else:
        typer.echo(dumps_document(relabeled), nl=False)

    if not quiet and rows:
        _console.print(build_results_table(rows))


@app.command()
def estimate(
    count: int = typer.Argument(..., min=0, help="Number of nodes to relabel."),
    delay_ms: Optional[int] = typer.Option(None, "--delay-ms", min=1, help="Pause between lookups in milliseconds."),
) -> None:
    """Show the expected run time for COUNT nodes without any lookup."""

    settings = load_settings(request_delay_ms=delay_ms)
    scheduler = RateScheduler.from_settings(settings)
    summary = scheduler.summarize(count)
    _console.print(build_summary_panel(summary, scheduler.config, settings.provider))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
