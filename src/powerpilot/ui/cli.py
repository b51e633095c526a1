"""CLI interface for powerpilot.

This module provides a Typer-based command-line interface for watching the
sampling pipeline, checking the policy by hand and inspecting scheme bindings.
"""

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from powerpilot.config import SchemeBindingsError, get_settings
from powerpilot.engine import PowerPolicyEngine, resolve_scheme_bindings
from powerpilot.policy import classify, fan_level_for
from powerpilot.providers import create_scheme_applier
from powerpilot.types import BatteryStatus, FusedReading, Mode

app = typer.Typer(help="powerpilot - CPU telemetry and adaptive power schemes")
console = Console()

_MODE_STYLES = {Mode.MIN: "green", Mode.BALANCED: "yellow", Mode.MAX: "red"}


def _format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"~{hours} h {mins} min" if hours > 0 else f"~{mins} min"


def format_battery(battery: BatteryStatus) -> str:
    """Human-readable battery line, e.g. "57%, ~1 h 5 min until empty"."""
    if battery.percent is None:
        return "n/a (on AC?)"

    pct = f"{battery.percent}%"
    if battery.charging and battery.minutes_to_full:
        return f"{pct}, {_format_duration(battery.minutes_to_full)} until full"
    if battery.on_battery and battery.minutes_remaining:
        return f"{pct}, {_format_duration(battery.minutes_remaining)} until empty"
    if battery.on_battery:
        return f"{pct} (time remaining unknown)"
    return f"{pct} (on AC)"


def _format_value(value: float | None, unit: str, digits: int = 0) -> str:
    if value is None:
        return "-"
    return f"{value:.{digits}f}{unit}"


def _format_mode(mode: Mode | None) -> str:
    if mode is None:
        return "-"
    return f"[{_MODE_STYLES[mode]}]{mode.value}[/{_MODE_STYLES[mode]}]"


def _print_reading(reading: FusedReading, battery: BatteryStatus, mode: Mode | None) -> None:
    fan = (
        fan_level_for(reading.max_temp_celsius).description
        if reading.max_temp_celsius is not None
        else "-"
    )
    console.print(
        f"load {_format_value(reading.load_percent, '%'):>5}  "
        f"freq {_format_value(reading.frequency_mhz, ' MHz'):>9}  "
        f"temp {_format_value(reading.max_temp_celsius, ' °C'):>6}  "
        f"fan {fan:<12}  "
        f"battery {format_battery(battery)}  "
        f"→ {_format_mode(mode)}"
    )


@app.command(name="monitor")
def monitor_command(
    interval: Optional[int] = typer.Option(
        None, "--interval", "-i", help="Poll interval in ms (500, 1000, 2000, 5000)"
    ),
    auto: Optional[bool] = typer.Option(
        None, "--auto/--no-auto", help="Switch power schemes automatically"
    ),
    debounce: Optional[int] = typer.Option(
        None, "--debounce", "-d", help="Auto-apply debounce in ms (1000-10000 presets)"
    ),
    duration: float = typer.Option(
        0.0, "--duration", help="Stop after this many seconds (0 = until Ctrl+C)"
    ),
) -> None:
    """Watch CPU load, frequency, temperature and the recommended mode.

    Examples:
        powerpilot monitor
        powerpilot monitor --interval 2000 --auto --debounce 5000
    """
    try:
        engine = PowerPolicyEngine.from_settings()
        if interval is not None:
            engine.set_poll_interval(interval)
        if debounce is not None:
            engine.set_debounce_interval(debounce)
        if auto is not None:
            engine.set_auto_mode(auto)
    except (ValidationError, ValueError, SchemeBindingsError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    console.print(
        f"[bold blue]Monitoring[/bold blue] every {engine.scheduler.interval_ms} ms, "
        f"auto mode {'on' if engine.controller.enabled else 'off'} "
        f"[dim](Ctrl+C to stop)[/dim]"
    )
    engine.add_reading_listener(
        lambda reading, battery: _print_reading(
            reading, battery, engine.current_recommendation()
        )
    )

    try:
        asyncio.run(_run_engine(engine, duration))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped[/dim]")


async def _run_engine(engine: PowerPolicyEngine, duration: float) -> None:
    """Run the engine until the duration elapses or the task is cancelled."""
    await engine.start()
    try:
        if duration > 0:
            await asyncio.sleep(duration)
        else:
            await asyncio.Event().wait()
    finally:
        await engine.stop()


@app.command(name="classify")
def classify_command(
    load: Optional[float] = typer.Option(None, "--load", help="CPU load in percent"),
    temp: Optional[float] = typer.Option(None, "--temp", help="Max CPU temperature in °C"),
    battery_percent: Optional[int] = typer.Option(
        None, "--battery-percent", help="Battery charge in percent"
    ),
    on_battery: bool = typer.Option(False, "--on-battery", help="Running from the battery"),
) -> None:
    """Print the mode the policy recommends for the given values.

    Examples:
        powerpilot classify --load 90 --temp 70
        powerpilot classify --load 10 --battery-percent 20 --on-battery
    """
    battery = BatteryStatus(percent=battery_percent, on_battery=on_battery)
    mode = classify(load, temp, battery)
    console.print(mode.value)


@app.command(name="schemes")
def schemes_command() -> None:
    """Show the configured scheme bindings and the active scheme."""
    try:
        settings = get_settings()
        applier = create_scheme_applier(
            settings.scheme_backend,
            timeout_seconds=settings.scheme_command_timeout_seconds,
        )
        bindings = resolve_scheme_bindings(settings, applier)
    except (ValidationError, ValueError, SchemeBindingsError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    active_id = applier.get_active() if applier is not None else None
    active_mode = bindings.mode_for(active_id)

    table = Table(title="Scheme bindings")
    table.add_column("Mode", style="cyan")
    table.add_column("Scheme", style="white", overflow="fold")
    table.add_column("Active", style="green")

    for mode in Mode:
        table.add_row(
            mode.value,
            bindings.identifier_for(mode) or "[dim]unbound[/dim]",
            "✓" if mode == active_mode else "",
        )

    console.print(table)
    backend = type(applier).__name__ if applier is not None else "none"
    console.print(f"[dim]Backend: {backend}; active scheme: {active_id or 'unknown'}[/dim]")


@app.command(name="fan")
def fan_command(
    temp: float = typer.Argument(..., help="Max CPU temperature in °C"),
) -> None:
    """Print the fan step for a temperature.

    Examples:
        powerpilot fan 45
    """
    level = fan_level_for(temp)
    console.print(f"Step {level.step_index}: {level.description} ({level.percent:.0f}%)")


if __name__ == "__main__":
    app()
