from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_summary(payload: Dict[str, Any]) -> None:
    categories = payload.get("categories") or []

    echo_heading("Summary")
    echo_key_values(
        [("total records", payload.get("total_count"))]
        + [(f"{item.get('category')} records", item.get("count")) for item in categories]
        + [("exceeded threshold", payload.get("exceeded_count"))]
    )

    typer.echo()
    echo_heading("Average Readings (kWh)")
    if not categories:
        typer.echo("No readings available.")
        return
    for item in categories:
        average = item.get("average_reading")
        shown = f"{average} kWh" if average is not None else "n/a"
        typer.echo(f"{item.get('category')}: {shown}")


def render_readings(readings: Iterable[Dict[str, Any]]) -> None:
    count = 0
    for item in readings:
        count += 1
        flag = " EXCEEDED" if item.get("isExceeded") else ""
        typer.echo(
            f"{item.get('year')} {item.get('month'):<9} floor {item.get('floor')} "
            f"{item.get('category'):<9} {item.get('reading')} kWh{flag}"
        )
    if not count:
        typer.echo("No readings matched.")
