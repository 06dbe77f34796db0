"""Container scan: one listing plus one stats snapshot per running container."""

import logging
import threading
from typing import Any

from pydantic import ValidationError

from dockerview.docker_handler import ContainerStatsError, DockerClientWrapper
from dockerview.formatting import format_percent
from dockerview.models import ContainerRecord, DecodedStats
from dockerview.stats import decode_stats

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 12


def short_id(container_id: str) -> str:
    """Truncate a container ID to 12 characters."""
    return container_id[:SHORT_ID_LENGTH]


def display_name(summary: dict[str, Any]) -> str:
    """First container name without the leading ``/``; short ID when unnamed."""
    names = summary.get("Names") or []
    if not names:
        return short_id(summary.get("Id", ""))
    name = names[0]
    return name[1:] if name.startswith("/") else name


def display_status(summary: dict[str, Any]) -> str:
    """Free-text status (``"Up 2 hours"``) when present, else the coarse state."""
    return summary.get("Status") or summary.get("State") or ""


def build_record(summary: dict[str, Any], stats: DecodedStats) -> ContainerRecord:
    """Assemble the display row for one listed container.

    Raises
    ------
    ContainerStatsError
        If the listing entry lacks an ID or has malformed name or status fields.
    """
    read, write = stats.block_io
    try:
        return ContainerRecord(
            id=short_id(summary["Id"]),
            name=display_name(summary),
            status=display_status(summary),
            cpu_percent=format_percent(stats.cpu_percent),
            cpu_usage=stats.cpu_percent,
            memory=stats.memory,
            block_io=f"{read} / {write}",
            network=stats.network,
        )
    except (KeyError, AttributeError, TypeError, ValidationError) as e:
        raise ContainerStatsError(
            "Malformed container summary",
            details={"error": str(e), "id": summary.get("Id")},
        ) from e


class ContainerCollector:
    """Collects display records for all running containers.

    Parameters
    ----------
    client : DockerClientWrapper
        Connected client returned by the resolver.
    """

    def __init__(self, client: DockerClientWrapper):
        self.client = client

    def collect(self, cancel: threading.Event | None = None) -> list[ContainerRecord]:
        """Run one scan.

        Stats are fetched serially in listing order. A container whose stats
        cannot be fetched or decoded is left out of the result; only a
        failed listing fails the scan.

        Parameters
        ----------
        cancel : threading.Event, optional
            When set, the scan stops before the next container.

        Returns
        -------
        list[ContainerRecord]
            Records in listing order, empty when nothing is running.

        Raises
        ------
        ContainerListError
            If the container listing fails.
        """
        containers = self.client.list_running()
        records: list[ContainerRecord] = []

        for summary in containers:
            if cancel is not None and cancel.is_set():
                logger.debug("Scan cancelled")
                break

            container_id = summary.get("Id", "")
            try:
                raw = self.client.stats_snapshot(container_id)
                stats = decode_stats(raw)
                records.append(build_record(summary, stats))
            except ContainerStatsError as e:
                # Containers can exit between the listing and the stats call
                logger.debug(f"Skipping {short_id(str(container_id))}: {e}")
                continue

        return records
