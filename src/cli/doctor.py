"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.geo_sources import build_lookup_client
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.domain.models import LookupOutcome
from core.domain.provider import GeoProvider
from core.services.label_rewriter import rewrite_label
from core.services.rate_scheduler import RateScheduler

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

PROBE_ADDRESS = "8.8.8.8"


async def _probe_lookup(settings: AppSettings, address: str) -> LookupOutcome:
    async with build_async_client(settings) as client:
        lookup = build_lookup_client(settings, client)
        return await lookup.resolve(address)


@app.command()
def run(
    address: str = typer.Option(PROBE_ADDRESS, "--address", help="Address used for the live lookup probe."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="node-geo-filter Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Provider", "OK", settings.provider.label())
    table.add_row("Endpoint", "OK", settings.resolved_endpoint())
    if settings.credential():
        table.add_row("Token", "OK", "Set (hidden)")
    elif settings.provider.requires_credential:
        table.add_row("Token", "MISSING", "Anonymous ipinfo requests are heavily rate-limited")
    else:
        table.add_row("Token", "N/A", "Provider needs no credential")

    effective = RateScheduler.from_settings(settings).config.effective_limit_per_minute
    pacing_ok = effective <= settings.reference_limit_per_minute
    table.add_row(
        "Pacing",
        "OK" if pacing_ok else "WARN",
        f"{settings.request_delay_ms} ms -> ~{effective:.1f}/min (limit {settings.reference_limit_per_minute}/min)",
    )
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g} s per lookup")

    # Live lookup (best-effort)
    outcome = asyncio.run(_probe_lookup(settings, address))
    table.add_row(
        "Live lookup",
        "OK" if outcome.kind == "success" else "FAIL",
        rewrite_label(address, outcome),
    )

    _console.print(table)

    if not pacing_ok:
        _console.print(
            "\n[yellow]Note:[/yellow] raise NODEGEO_REQUEST_DELAY_MS to stay under the provider limit."
        )


@app.command(name="setup-token")
def setup_token() -> None:
    """Store the ipinfo token in the user config .env and select ipinfo."""

    token = typer.prompt("ipinfo token", hide_input=True, confirmation_prompt=False).strip()
    if not token:
        raise typer.BadParameter("token is required")

    env_path = write_user_env_vars(
        {
            "NODEGEO_IPINFO_TOKEN": token,
            "NODEGEO_PROVIDER": GeoProvider.IPINFO.value,
        }
    )

    _console.print(f"[green]Saved ipinfo config to:[/green] {env_path}")
