"""
Pydantic data models for dockerview.

This module defines the data structures flowing through one poll cycle:
- Raw stats payload as returned by the Docker Engine API
- Decoded per-container metrics
- Display-ready container records
- Published poll snapshots read by the renderer

Raw payload models ignore unknown keys and default missing counters to zero,
so older daemons and cgroup v2 hosts decode without special cases.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Raw Stats Payload
# =============================================================================


class CPUUsage(BaseModel):
    """Cumulative CPU time consumed by the container (nanoseconds)."""

    total_usage: int = Field(0, ge=0)
    percpu_usage: list[int] | None = None


class CPUStats(BaseModel):
    """
    One CPU counter reading.

    Parameters
    ----------
    cpu_usage : CPUUsage
        Container CPU counters
    system_cpu_usage : int
        Host-wide CPU time counter (nanoseconds)
    online_cpus : int, optional
        Number of CPUs available to the container; None when the daemon
        omits the field
    """

    cpu_usage: CPUUsage = Field(default_factory=CPUUsage)
    system_cpu_usage: int = Field(0, ge=0)
    online_cpus: int | None = Field(None, ge=0)

    @property
    def cpu_count(self) -> int:
        """Online CPUs, falling back to the per-CPU list length when absent."""
        if self.online_cpus is not None:
            return self.online_cpus
        return len(self.cpu_usage.percpu_usage or [])


class MemoryStats(BaseModel):
    """Memory usage and limit in bytes."""

    usage: int = Field(0, ge=0)
    limit: int = Field(0, ge=0)


class BlkioEntry(BaseModel):
    """One per-device block I/O counter tagged with its operation."""

    major: int = 0
    minor: int = 0
    op: str = ""
    value: int = Field(0, ge=0)


class BlkioStats(BaseModel):
    """Block I/O service bytes, recursive over the container's cgroup."""

    io_service_bytes_recursive: list[BlkioEntry] | None = None


class NetworkStats(BaseModel):
    """Cumulative byte counters for one network interface."""

    rx_bytes: int = Field(0, ge=0)
    tx_bytes: int = Field(0, ge=0)


class RawStatsSnapshot(BaseModel):
    """
    Stats payload for a single container.

    A non-streaming stats call embeds two readings: ``cpu_stats`` (current)
    and ``precpu_stats`` (previous sample), from which rates are derived.

    Examples
    --------
    >>> snap = RawStatsSnapshot.model_validate({"memory_stats": {"usage": 2048}})
    >>> snap.memory_stats.usage
    2048
    >>> snap.cpu_stats.system_cpu_usage
    0
    """

    model_config = ConfigDict(extra="ignore")

    cpu_stats: CPUStats = Field(default_factory=CPUStats)
    precpu_stats: CPUStats = Field(default_factory=CPUStats)
    memory_stats: MemoryStats = Field(default_factory=MemoryStats)
    blkio_stats: BlkioStats = Field(default_factory=BlkioStats)
    networks: dict[str, NetworkStats] | None = None


# =============================================================================
# Decoded / Display Models
# =============================================================================


class DecodedStats(BaseModel):
    """
    Normalized metrics derived from one stats payload.

    Parameters
    ----------
    cpu_percent : float
        CPU utilization; 100.0 equals one fully used core
    memory : str
        Formatted memory usage
    block_io : tuple[str, str]
        Formatted (read, write) byte totals
    network : str
        Formatted ``"↓rx ↑tx"`` byte totals
    memory_usage : int
        Raw memory usage in bytes
    memory_limit : int
        Raw memory limit in bytes
    """

    model_config = ConfigDict(frozen=True)

    cpu_percent: float = Field(..., ge=0)
    memory: str
    block_io: tuple[str, str]
    network: str
    memory_usage: int = Field(0, ge=0)
    memory_limit: int = Field(0, ge=0)


class ContainerRecord(BaseModel):
    """
    Display-ready row for one running container.

    Parameters
    ----------
    id : str
        Container ID, truncated to 12 characters
    name : str
        First container name without its leading ``/``
    status : str
        Free-text status (e.g. ``"Up 3 hours"``), or the coarse state
    cpu_percent : str
        Formatted CPU percentage
    cpu_usage : float
        Numeric CPU percentage
    memory : str
        Formatted memory usage
    block_io : str
        Formatted ``"read / write"`` pair
    network : str
        Formatted ``"↓rx ↑tx"`` pair

    Examples
    --------
    >>> record = ContainerRecord(
    ...     id="abc123def456",
    ...     name="web",
    ...     status="Up 2 minutes",
    ...     cpu_percent="0.5%",
    ...     cpu_usage=0.5,
    ...     memory="12.0 MB",
    ...     block_io="0 B / 0 B",
    ...     network="↓1.0 KB ↑512 B",
    ... )
    >>> record.name
    'web'
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    status: str
    cpu_percent: str
    cpu_usage: float = Field(0.0, ge=0)
    memory: str
    block_io: str
    network: str


class PollSnapshot(BaseModel):
    """
    Result of one poll cycle, published as a single immutable value.

    Parameters
    ----------
    records : tuple[ContainerRecord, ...]
        Records in listing order
    error : Exception, optional
        Cycle-level failure, if any
    cycle : int
        Sequence number of the cycle (0 before the first publish)
    collected_at : datetime, optional
        When the cycle finished
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    records: tuple[ContainerRecord, ...] = ()
    error: Exception | None = None
    cycle: int = Field(0, ge=0)
    collected_at: datetime | None = None
