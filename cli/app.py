from __future__ import annotations

import random
import signal
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.config import load_config
from cli.render import render_banner, render_cycle, render_summary
from logging_config import configure_logging
from services.encoder import encode
from services.generator import ReadingComposer
from services.simulator import CycleStatus, SensorSimulator, build_simulators, run_simulators
from settings import Settings

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class CLIState:
    settings: Settings


app = typer.Typer(
    help="Simulate IoT sensors posting partial readings to an ingestion endpoint.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _build(settings: Settings, count: int, seed: Optional[int]) -> list[SensorSimulator]:
    try:
        return build_simulators(count, settings, seed=seed)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _install_stop_handlers(stop_event: threading.Event) -> Dict[int, Any]:
    def _handler(signum: int, _frame: Any) -> None:
        typer.echo(f"\nReceived {signal.Signals(signum).name}, stopping after the current cycle...")
        stop_event.set()

    previous: Dict[int, Any] = {}
    for signum in _STOP_SIGNALS:
        previous[signum] = signal.signal(signum, _handler)
    return previous


def _restore_handlers(previous: Dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Ingestion URL (defaults to SIMULATOR_ENDPOINT_URL env or http://localhost:8080/api/sensors).",
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Sensor name sent with every reading."),
    location: Optional[str] = typer.Option(None, "--location", "-l", help="Sensor location."),
    interval: Optional[int] = typer.Option(None, "--interval", min=1, help="Base seconds between cycles."),
    jitter: Optional[int] = typer.Option(None, "--jitter", min=0, help="Maximum +/- seconds added to the interval."),
    drop_probability: Optional[float] = typer.Option(
        None,
        "--drop-probability",
        min=0.0,
        max=1.0,
        help="Chance that a cycle's reading is dropped before sending.",
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP connect/read timeout in seconds."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level, e.g. DEBUG or INFO."),
) -> None:
    """Entry point for the CLI."""
    settings = load_config(
        endpoint_url=endpoint,
        sensor_name=name,
        location=location,
        base_interval=interval,
        jitter=jitter,
        drop_probability=drop_probability,
        request_timeout=timeout,
        log_level=log_level,
    )
    ctx.obj = CLIState(settings=settings)


@app.command("run")
def run_command(
    ctx: typer.Context,
    sensors: int = typer.Option(1, "--sensors", min=1, help="Number of independent sensors to simulate."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible randomness."),
) -> None:
    """Run the simulation loop until interrupted."""
    state = _get_state(ctx)
    configure_logging(state.settings.log_level)
    simulators = _build(state.settings, sensors, seed)
    render_banner(state.settings, sensors)

    stop_event = threading.Event()
    previous = _install_stop_handlers(stop_event)
    try:
        completed = run_simulators(simulators, stop_event)
    finally:
        _restore_handlers(previous)
        for simulator in simulators:
            simulator.close()
    render_summary(completed)


@app.command("once")
def once_command(
    ctx: typer.Context,
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible randomness."),
    allow_drop: bool = typer.Option(
        False,
        "--allow-drop/--no-drop",
        help="Apply the drop probability to this single cycle.",
    ),
) -> None:
    """Generate and send a single reading right away."""
    state = _get_state(ctx)
    configure_logging(state.settings.log_level)
    (simulator,) = _build(state.settings, 1, seed)
    try:
        result = simulator.send_now(allow_drop=allow_drop)
    finally:
        simulator.close()

    payload = encode(result.reading) if result.reading is not None else None
    render_cycle(result, payload)
    if result.status not in (CycleStatus.delivered, CycleStatus.dropped):
        raise typer.Exit(code=1)


@app.command("preview")
def preview_command(
    ctx: typer.Context,
    count: int = typer.Option(5, "--count", "-c", min=1, help="Number of payloads to print."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible randomness."),
) -> None:
    """Print generated payloads without sending anything."""
    state = _get_state(ctx)
    composer = ReadingComposer(
        sensor_name=state.settings.sensor_name,
        location=state.settings.location,
        rng=random.Random(seed),
    )
    for _ in range(count):
        composed = composer.compose()
        typer.echo(encode(composed.reading).decode("utf-8"))
