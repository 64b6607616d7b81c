from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_readings, render_summary
from errors import SeederError
from logging_config import configure_logging
from services.seeder import build_default_seeder


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Seed and inspect synthetic facility energy readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Energy API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds for API requests.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, http_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("seed")
def seed_command(
    store_path: Optional[str] = typer.Option(
        None,
        "--store-path",
        help="JSON file backing the collection (defaults to ENERGY_STORE_PATH).",
    ),
    random_seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed the random source for a reproducible dataset.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level for this run (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Replace all stored energy readings with a freshly generated dataset."""
    configure_logging(log_level)
    seeder = build_default_seeder(store_path=store_path, random_seed=random_seed)
    typer.echo("Starting energy data seeding...")
    try:
        summary = seeder.seed()
    except SeederError as exc:
        typer.secho(f"Error seeding energy data: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"Successfully seeded {summary.total_count} energy records",
        fg=typer.colors.GREEN,
    )
    typer.echo()
    render_summary(summary.model_dump(mode="json"))


@app.command("summary")
def summary_command(
    ctx: typer.Context,
    year: Optional[int] = typer.Option(None, "--year", help="Restrict to one year."),
) -> None:
    """Fetch per-category counts and averages from the API."""
    state = _get_state(ctx)
    payload = state.client.get_summary(year=year)
    render_summary(payload)


@app.command("readings")
def readings_command(
    ctx: typer.Context,
    year: Optional[int] = typer.Option(None, "--year"),
    month: Optional[str] = typer.Option(None, "--month", help="Calendar month name."),
    floor: Optional[int] = typer.Option(None, "--floor", min=1, max=5),
    category: Optional[str] = typer.Option(None, "--category"),
    exceeded: Optional[bool] = typer.Option(
        None,
        "--exceeded/--not-exceeded",
        help="Only readings above (or at/below) the threshold.",
    ),
) -> None:
    """List stored readings from the API."""
    state = _get_state(ctx)
    readings = state.client.list_readings(
        {
            "year": year,
            "month": month,
            "floor": floor,
            "category": category,
            "exceeded": exceeded,
        }
    )
    render_readings(readings)
