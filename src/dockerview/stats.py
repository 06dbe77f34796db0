"""Decoding of Docker stats payloads into dashboard metrics.

CPU percentage follows the Docker CLI formula::

    cpu_percent = (cpu_delta / system_delta) * online_cpus * 100

where both deltas are taken between ``precpu_stats`` and ``cpu_stats`` of the
same payload.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from dockerview.docker_handler.exceptions import StatsDecodeError
from dockerview.formatting import format_bytes
from dockerview.models import DecodedStats, RawStatsSnapshot


def parse_snapshot(payload: Mapping[str, Any] | str | bytes) -> RawStatsSnapshot:
    """Validate a raw payload (decoded dict or JSON text).

    Raises
    ------
    StatsDecodeError
        If the payload is not a JSON object or a counter has the wrong type.
    """
    try:
        if isinstance(payload, (str, bytes)):
            return RawStatsSnapshot.model_validate_json(payload)
        return RawStatsSnapshot.model_validate(payload)
    except ValidationError as e:
        raise StatsDecodeError(
            "Malformed stats payload",
            details={"error": str(e), "error_count": e.error_count()},
        ) from e


def calculate_cpu_percent(snapshot: RawStatsSnapshot) -> float:
    """CPU utilization between the two embedded readings.

    Returns exactly ``0.0`` unless the container delta, the system delta and
    the online CPU count are all strictly positive.
    """
    cpu, precpu = snapshot.cpu_stats, snapshot.precpu_stats

    cpu_delta = cpu.cpu_usage.total_usage - precpu.cpu_usage.total_usage
    system_delta = cpu.system_cpu_usage - precpu.system_cpu_usage
    num_cpus = cpu.cpu_count

    if cpu_delta > 0 and system_delta > 0 and num_cpus > 0:
        return (cpu_delta / system_delta) * num_cpus * 100.0
    return 0.0


def calculate_block_io(snapshot: RawStatsSnapshot) -> tuple[int, int]:
    """Sum read and write service bytes over all devices, keyed by op tag."""
    read_bytes = 0
    write_bytes = 0

    for entry in snapshot.blkio_stats.io_service_bytes_recursive or []:
        op = entry.op.lower()
        if op == "read":
            read_bytes += entry.value
        elif op == "write":
            write_bytes += entry.value

    return read_bytes, write_bytes


def calculate_network_bytes(snapshot: RawStatsSnapshot) -> tuple[int, int]:
    """Total received and transmitted bytes across all interfaces."""
    networks = snapshot.networks or {}
    rx_bytes = sum(iface.rx_bytes for iface in networks.values())
    tx_bytes = sum(iface.tx_bytes for iface in networks.values())
    return rx_bytes, tx_bytes


def decode_stats(payload: Mapping[str, Any] | str | bytes) -> DecodedStats:
    """Decode one stats payload into display metrics.

    Parameters
    ----------
    payload : Mapping or str or bytes
        Stats payload as returned by ``APIClient.stats(..., stream=False)``,
        or its JSON text.

    Returns
    -------
    DecodedStats
        CPU percentage plus formatted memory, block I/O and network figures.

    Raises
    ------
    StatsDecodeError
        If the payload is malformed.

    Examples
    --------
    >>> stats = decode_stats({
    ...     "cpu_stats": {"cpu_usage": {"total_usage": 600}, "system_cpu_usage": 2000,
    ...                   "online_cpus": 2},
    ...     "precpu_stats": {"cpu_usage": {"total_usage": 100}, "system_cpu_usage": 1000},
    ...     "memory_stats": {"usage": 1048576},
    ... })
    >>> stats.cpu_percent
    100.0
    >>> stats.memory
    '1.0 MB'
    >>> stats.network
    '↓0 B ↑0 B'
    """
    snapshot = parse_snapshot(payload)

    read_bytes, write_bytes = calculate_block_io(snapshot)
    rx_bytes, tx_bytes = calculate_network_bytes(snapshot)

    return DecodedStats(
        cpu_percent=calculate_cpu_percent(snapshot),
        memory=format_bytes(snapshot.memory_stats.usage),
        block_io=(format_bytes(read_bytes), format_bytes(write_bytes)),
        network=f"↓{format_bytes(rx_bytes)} ↑{format_bytes(tx_bytes)}",
        memory_usage=snapshot.memory_stats.usage,
        memory_limit=snapshot.memory_stats.limit,
    )
