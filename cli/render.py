from __future__ import annotations

from typing import Any, Iterable

import typer

from services.delivery import DeliverySuccess, TransportError, UnexpectedStatus
from services.simulator import CycleResult, CycleStatus
from settings import Settings


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_banner(settings: Settings, sensors: int = 1) -> None:
    echo_heading("=== IoT Sensor Simulator ===")
    echo_key_values(
        [
            ("API URL", settings.endpoint_url),
            ("Sensor", settings.sensor_name if sensors == 1 else f"{settings.sensor_name}-1..{sensors}"),
            ("Location", settings.location),
            ("Interval", f"~{settings.base_interval}s (±{settings.jitter}s)"),
            ("Drop probability", settings.drop_probability),
        ]
    )
    typer.echo("Starting simulation... (Ctrl+C to stop)")
    typer.echo()


def render_cycle(result: CycleResult, payload: bytes | None = None) -> None:
    echo_heading(f"Cycle {result.cycle}")
    if result.status is CycleStatus.dropped:
        typer.secho("PACKET LOSS - transmission skipped", fg=typer.colors.YELLOW)
        return

    if payload is not None:
        typer.echo(f"payload: {payload.decode('utf-8')}")
    if result.field_count is not None:
        typer.echo(f"field_count: {result.field_count}")

    outcome = result.outcome
    if isinstance(outcome, DeliverySuccess):
        typer.secho(f"SUCCESS - status {outcome.status_code}", fg=typer.colors.GREEN)
    elif isinstance(outcome, UnexpectedStatus):
        detail = f": {outcome.detail}" if outcome.detail else ""
        typer.secho(f"WARNING - status {outcome.status_code}{detail}", fg=typer.colors.YELLOW)
    elif isinstance(outcome, TransportError):
        typer.secho(f"ERROR - {outcome.reason}", fg=typer.colors.RED, err=True)
    elif result.error is not None:
        typer.secho(f"ERROR - {result.error}", fg=typer.colors.RED, err=True)


def render_summary(completed: dict[str, int]) -> None:
    typer.echo()
    echo_heading("Simulation stopped")
    echo_key_values(sorted(completed.items()))
