"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same tables and panels.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import LookupOutcome, Node, RateConfig, RunSummary
from core.domain.provider import GeoProvider

_OUTCOME_STYLES = {
    "success": ("resolved", "green"),
    "logical_error": ("rejected", "yellow"),
    "http_error": ("http error", "red"),
    "transport_error": ("transport error", "red"),
}


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Skipped in quiet mode so stdout/stderr stay clean for pipelines.
    """

    title = Text("node-geo-filter", style="bold cyan")
    subtitle = Text("Real vs nominal location • rate-limited lookups", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_summary_panel(
    summary: RunSummary,
    config: RateConfig,
    provider: GeoProvider,
) -> Panel:
    """Pre-run estimate: node count, pacing and the ceiling advisory."""

    body = Text()
    body.append(f"Provider: {provider.label()}\n")
    body.append(f"Nodes: {summary.node_count}\n")
    body.append(
        f"Delay: {config.request_delay_ms} ms "
        f"(~{config.effective_limit_per_minute:.1f}/min, limit {config.reference_limit_per_minute}/min)\n"
    )
    body.append(f"Estimated duration: {summary.estimated_total_ms / 1000:.1f} s")
    border = "cyan"
    if summary.exceeds_ceiling:
        border = "yellow"
        body.append(
            f"\nExceeds the {summary.ceiling_ms / 1000:.1f} s execution ceiling",
            style="bold yellow",
        )
    return Panel(body, title=Text("Run estimate", style="bold"), border_style=border)


def build_results_table(rows: Sequence[tuple[Node, LookupOutcome]]) -> Table:
    table = Table(title="Relabeled nodes")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Address", style="cyan", no_wrap=True)
    table.add_column("Outcome")
    table.add_column("New name", style="white")
    for index, (node, outcome) in enumerate(rows, start=1):
        label, style = _OUTCOME_STYLES.get(outcome.kind, (outcome.kind, "white"))
        table.add_row(str(index), node.address, Text(label, style=style), node.display_name)
    return table
