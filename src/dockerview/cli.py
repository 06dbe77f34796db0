"""CLI entry point for dockerview.

Running ``dockerview`` without a subcommand opens the live dashboard.
"""

import asyncio
import contextlib
import time
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dockerview import __version__
from dockerview.collector import ContainerCollector
from dockerview.config import DockerViewConfig, load_config
from dockerview.dashboard import build_table, run_dashboard
from dockerview.docker_handler import (
    ConfigurationError,
    ConnectionResolver,
    ContainerListError,
    DockerClientWrapper,
    NoDaemonFoundError,
)
from dockerview.logging_setup import configure_logging
from dockerview.poller import PollState

# Create CLI app
app = typer.Typer(
    name="dockerview",
    help="DockerView - live terminal monitor for Docker containers",
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to a dockerview.yaml config file"),
]
HostOption = Annotated[
    str | None,
    typer.Option("--host", "-H", help="Docker daemon URL (overrides DOCKER_HOST)"),
]
IntervalOption = Annotated[
    float | None,
    typer.Option("--interval", "-i", help="Seconds between collection cycles"),
]


def _exit_invalid_config(error: Exception) -> NoReturn:
    rprint(f"[red]Error:[/red] Invalid configuration: {escape(str(error))}")
    raise typer.Exit(1) from None


def _load_config(
    ctx: typer.Context,
    config_file: Path | None,
    host: str | None = None,
    interval: float | None = None,
) -> DockerViewConfig:
    """Load settings; command options win over options given before the command."""
    parent = ctx.obj or {}
    config_file = config_file or parent.get("config")
    host = host or parent.get("host")
    interval = interval or parent.get("interval")

    try:
        config = load_config(config_file)
        if host is not None:
            config.docker = config.docker.model_validate(
                {**config.docker.model_dump(), "docker_host": host}
            )
        if interval is not None:
            config.monitoring = config.monitoring.model_validate(
                {**config.monitoring.model_dump(), "poll_interval_seconds": interval}
            )
    except (FileNotFoundError, ValidationError, ValueError) as e:
        _exit_invalid_config(e)

    configure_logging(config.logging, console)
    return config


def _connect(config: DockerViewConfig) -> DockerClientWrapper:
    """Resolve a daemon or exit with status 1."""
    resolver = ConnectionResolver(config.docker)
    try:
        return resolver.resolve()
    except NoDaemonFoundError as e:
        rprint(f"[red]Failed to connect to Docker:[/red] {escape(str(e))}")
        rprint(f"  Tried: {', '.join(e.details.get('attempted', []))}")
        rprint("  Set DOCKER_HOST or pass --host to point at your daemon.")
        raise typer.Exit(1) from None
    except ConfigurationError as e:
        _exit_invalid_config(e)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: ConfigOption = None,
    host: HostOption = None,
    interval: IntervalOption = None,
) -> None:
    """Open the live dashboard when no subcommand is given."""
    ctx.obj = {"config": config, "host": host, "interval": interval}
    if ctx.invoked_subcommand is None:
        cmd_watch(ctx)


@app.command("watch")
def cmd_watch(
    ctx: typer.Context,
    config: ConfigOption = None,
    host: HostOption = None,
    interval: IntervalOption = None,
) -> None:
    """Show the live container dashboard."""
    settings = _load_config(ctx, config, host, interval)

    with _connect(settings) as client, contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_dashboard(client, settings.monitoring, __version__, console))


@app.command("snapshot")
def cmd_snapshot(
    ctx: typer.Context,
    config: ConfigOption = None,
    host: HostOption = None,
    interval: IntervalOption = None,
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=1, help="Number of cycles to print"),
    ] = 1,
) -> None:
    """Print container stats without the live display."""
    settings = _load_config(ctx, config, host, interval)
    state = PollState()

    with _connect(settings) as client:
        collector = ContainerCollector(client)
        for i in range(count):
            if i:
                time.sleep(settings.monitoring.poll_interval_seconds)
            try:
                snapshot = state.publish(collector.collect())
            except ContainerListError as e:
                rprint(f"[red]Error:[/red] {escape(str(e))}")
                raise typer.Exit(1) from None
            console.print(build_table(snapshot))


@app.command("sockets")
def cmd_sockets(
    ctx: typer.Context,
    config: ConfigOption = None,
    host: HostOption = None,
) -> None:
    """Probe every daemon discovery candidate and report the results."""
    settings = _load_config(ctx, config, host)
    resolver = ConnectionResolver(settings.docker)

    table = Table(title="Docker endpoints")
    table.add_column("#", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Address")
    table.add_column("Result")

    try:
        results = resolver.probe_all()
    except ConfigurationError as e:
        _exit_invalid_config(e)

    found = False
    for position, result in enumerate(results, start=1):
        found = found or result.ok
        if result.ok:
            outcome = "[green]✓ reachable[/green]"
        else:
            outcome = f"[red]✗[/red] {escape(result.error or '')}"
        table.add_row(
            str(position),
            result.candidate.label,
            result.candidate.address or "(environment)",
            outcome,
        )

    console.print(table)
    if not found:
        raise typer.Exit(1)


@app.command("version")
def cmd_version() -> None:
    """Show the version."""
    rprint(f"DockerView {__version__}")


# Entry point for the CLI
if __name__ == "__main__":
    app()
