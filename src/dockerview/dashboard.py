"""Rich rendering of poll snapshots and the live dashboard loop."""

import asyncio
import contextlib
import logging
import signal

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dockerview.collector import ContainerCollector
from dockerview.config import MonitoringSettings
from dockerview.docker_handler import DockerClientWrapper
from dockerview.models import ContainerRecord, PollSnapshot
from dockerview.poller import Poller, PollState

logger = logging.getLogger(__name__)

CPU_ALERT_PERCENT = 50.0
MAX_CELL_WIDTH = 20


def clip(value: str, width: int = MAX_CELL_WIDTH) -> str:
    """Shorten ``value`` to ``width`` characters, marking the cut with ``..``."""
    if len(value) <= width:
        return value
    return value[: width - 2] + ".."


def _status_style(status: str) -> str:
    return "red" if "exit" in status.lower() else "green"


def _cpu_style(record: ContainerRecord) -> str:
    return "red" if record.cpu_usage >= CPU_ALERT_PERCENT else "green"


def build_table(snapshot: PollSnapshot) -> Table:
    """Container table for one snapshot, with a placeholder row when empty."""
    table = Table(box=box.SIMPLE_HEAD, header_style="bold dark_orange", expand=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("CPU", justify="right", no_wrap=True)
    table.add_column("Memory", style="cyan", justify="right", no_wrap=True)
    table.add_column("Net I/O", style="bright_green", no_wrap=True)
    table.add_column("Block I/O", no_wrap=True)
    table.add_column("Status", no_wrap=True)

    for record in snapshot.records:
        table.add_row(
            record.id,
            clip(record.name),
            Text(record.cpu_percent, style=_cpu_style(record)),
            record.memory,
            record.network,
            record.block_io,
            Text(clip(record.status), style=_status_style(record.status)),
        )

    if not snapshot.records:
        if snapshot.error is not None:
            placeholder = Text(f"Error: {snapshot.error}", style="red")
        elif snapshot.cycle == 0:
            placeholder = Text("Collecting...", style="grey50")
        else:
            placeholder = Text("No containers running", style="grey50")
        table.add_row(placeholder)

    return table


def render(snapshot: PollSnapshot, version: str, endpoint: str | None = None) -> Panel:
    """
    Full dashboard frame for a snapshot.

    Parameters
    ----------
    snapshot : PollSnapshot
        Latest published poll result
    version : str
        Version shown in the title
    endpoint : str, optional
        Daemon address shown in the subtitle

    Returns
    -------
    Panel
        Renderable frame
    """
    subtitle = "Press Ctrl+C to exit"
    if endpoint:
        subtitle = f"{endpoint}  |  {subtitle}"

    body = Group(Text(subtitle, style="grey42"), build_table(snapshot))
    return Panel(
        body,
        title=Text(f"DockerView Monitor {version}", style="bold deep_sky_blue1"),
        title_align="left",
        border_style="grey27",
        box=box.ROUNDED,
        padding=(1, 2),
    )


async def run_dashboard(
    client: DockerClientWrapper,
    settings: MonitoringSettings,
    version: str,
    console: Console | None = None,
) -> None:
    """
    Run the live dashboard until SIGINT or SIGTERM.

    Parameters
    ----------
    client : DockerClientWrapper
        Connected client from the resolver
    settings : MonitoringSettings
        Poll interval and redraw rate
    version : str
        Version shown in the title
    console : Console, optional
        Console to draw on
    """
    console = console or Console()
    state = PollState()
    poller = Poller(ContainerCollector(client), state, settings.poll_interval_seconds)
    endpoint = client.endpoint

    # Handle shutdown signals
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def signal_handler() -> None:
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops; KeyboardInterrupt covers Ctrl+C there
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, signal_handler)

    tick = 1.0 / settings.refresh_per_second
    await poller.start()
    try:
        with Live(
            render(state.latest(), version, endpoint),
            console=console,
            screen=True,
            auto_refresh=False,
        ) as live:
            while not stop_event.is_set():
                live.update(render(state.latest(), version, endpoint), refresh=True)
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=tick)
    finally:
        await poller.stop()
        logger.info("Dashboard stopped")
