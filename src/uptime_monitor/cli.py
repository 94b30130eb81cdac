"""Command-line interface for Uptime Monitor."""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from uptime_monitor import __version__
from uptime_monitor.aggregator import StateAggregator
from uptime_monitor.config import Config, create_example_config
from uptime_monitor.formatter import format_timestamp
from uptime_monitor.models import ProbeResult
from uptime_monitor.monitor import UptimeMonitor
from uptime_monitor.storage import StateStore

console = Console()

DEFAULT_CONFIG_PATHS = ["uptime.yaml", "uptime.yml", "config.yaml", "~/.config/uptime-monitor/config.yaml"]


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_config(config: Optional[str]) -> Config:
    """Load the given config file, or the first one found in default locations."""
    if config:
        return Config.from_yaml(config)

    for default_path in DEFAULT_CONFIG_PATHS:
        path = Path(default_path).expanduser()
        if path.exists():
            return Config.from_yaml(path)

    console.print("[red]No configuration file found.[/]")
    console.print("Create one with: [cyan]uptime-monitor init[/]")
    sys.exit(1)


def format_duration(seconds: float) -> str:
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h"


def create_status_table(summary: dict) -> Table:
    """Create a Rich table displaying per-target status."""
    table = Table(title="Monitor Status", show_header=True, header_style="bold")

    table.add_column("Monitor", style="cyan", no_wrap=True)
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Down Since", justify="right")
    table.add_column("Incidents", justify="right")

    for info in summary["targets"].values():
        if info["up"]:
            status_text = Text("UP", style="green")
            down_since = Text("-", style="dim")
        else:
            status_text = Text("DOWN", style="red")
            down_since = Text(format_timestamp(info["down_since"]), style="red")

        latency = f"{info['latest_ping']:.0f} ms" if info["latest_ping"] is not None else "-"

        table.add_row(
            info["name"],
            status_text,
            latency,
            down_since,
            str(info["incidents"]),
        )

    return table


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Uptime Monitor - uptime state tracking and notifications."""
    pass


@main.command()
@click.argument("target_id")
@click.option("--up/--down", "is_up", required=True, help="Probe outcome")
@click.option("--ping", type=float, default=None, help="Measured latency in ms")
@click.option("--loc", default="", help="Location the probe ran from")
@click.option("--reason", default="", help="Failure reason for down probes")
@click.option("--now", type=float, default=None, help="Check time (epoch seconds, default: current time)")
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (default: from config)",
)
def record(
    target_id: str,
    is_up: bool,
    ping: Optional[float],
    loc: str,
    reason: str,
    now: Optional[float],
    config: Optional[str],
    log_level: Optional[str],
) -> None:
    """Record one probe result and send any notifications it triggers."""
    cfg = load_config(config)
    setup_logging(log_level or cfg.log_level)

    if cfg.get_monitor(target_id) is None:
        console.print(f"[red]Unknown monitor: {target_id}[/]")
        sys.exit(1)

    now = now if now is not None else time.time()
    store = StateStore(cfg.state_file, cfg.write_cooldown_minutes)
    monitor = UptimeMonitor(cfg, StateAggregator(store.load()))

    result = ProbeResult(target_id=target_id, is_up=is_up, ping=ping, loc=loc, reason=reason)
    cycle = monitor.run_cycle([result], now)
    store.save_if_due(monitor.aggregator.get_state(), now, cycle.state_changed)

    for report in cycle.targets:
        if report.outcome is not None:
            console.print(f"[bold]{target_id}:[/] {report.outcome.kind.value}")
        for request in report.dispatched:
            console.print(f"  [green]sent[/] {request.channel_id}: {request.title}")
        for request in report.failed:
            console.print(f"  [red]failed[/] {request.channel_id}: {request.title}")

    if cycle.errors:
        sys.exit(1)


@main.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--json", "output_json",
    is_flag=True,
    help="Output in JSON format",
)
def summary(config: Optional[str], output_json: bool) -> None:
    """Show current status of all monitors."""
    cfg = load_config(config)
    setup_logging("WARNING")

    store = StateStore(cfg.state_file, cfg.write_cooldown_minutes)
    monitor = UptimeMonitor(cfg, StateAggregator(store.load()))
    data = monitor.get_summary()

    if output_json:
        click.echo(json.dumps(data, indent=2))
        return

    down = [info for info in data["targets"].values() if not info["up"]]
    overall = "[red]DEGRADED[/]" if down else "[green]ALL UP[/]"
    last_update = format_timestamp(data["last_update"]) if data["last_update"] else "never"
    console.print(Panel(
        f"[bold]Overall Status:[/bold] {overall}\n"
        f"[bold]Availability:[/bold] {data['availability']:.3f}% "
        f"({data['checks']['up']} up / {data['checks']['down']} down checks)\n"
        f"[bold]Last Update:[/bold] {last_update}",
        title="Uptime Summary",
        border_style="red" if down else "green",
    ))
    console.print(create_status_table(data))


@main.command()
@click.argument("target_id")
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option("--time-zone", default="Etc/GMT", help="Time zone for timestamps")
def incidents(config: Optional[str], target_id: str, time_zone: str) -> None:
    """List the incident history of one monitor."""
    cfg = load_config(config)
    setup_logging("WARNING")

    store = StateStore(cfg.state_file, cfg.write_cooldown_minutes)
    aggregator = StateAggregator(store.load())
    history = aggregator.ledger.history(target_id)

    if not history:
        console.print(f"[dim]No incidents recorded for {target_id}[/]")
        return

    table = Table(title=f"Incidents: {target_id}", show_header=True, header_style="bold")
    table.add_column("Start", no_wrap=True)
    table.add_column("End", no_wrap=True)
    table.add_column("Duration", justify="right")
    table.add_column("Checks", justify="right")
    table.add_column("Last Error")

    for incident in reversed(history):
        if incident.is_open:
            end = Text("ongoing", style="red")
            duration = "-"
        else:
            end = Text(format_timestamp(incident.end, time_zone))
            duration = format_duration(incident.duration)
        table.add_row(
            format_timestamp(incident.first_start, time_zone),
            end,
            duration,
            str(len(incident.start)),
            incident.error[-1] or "unspecified",
        )

    console.print(table)


@main.command()
@click.option(
    "-o", "--output",
    default="uptime.yaml",
    help="Output file path",
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing file",
)
def init(output: str, force: bool) -> None:
    """Create an example configuration file."""
    path = Path(output)

    if path.exists() and not force:
        console.print(f"[red]File already exists: {path}[/]")
        console.print("Use --force to overwrite")
        sys.exit(1)

    example = create_example_config()
    example.to_yaml(path)

    console.print(f"[green]Created example configuration: {path}[/]")
    console.print("Edit this file to add your monitors and notification channels.")


if __name__ == "__main__":
    main()
