"""Docker daemon discovery, connection management and error handling."""

from .client import DockerClientWrapper
from .exceptions import (
    ConfigurationError,
    ContainerError,
    ContainerListError,
    ContainerStatsError,
    DaemonConnectionError,
    DockerViewError,
    NoDaemonFoundError,
    StatsDecodeError,
)
from .resolver import CandidateKind, ConnectionCandidate, ConnectionResolver, ProbeResult

__all__ = [
    "DockerClientWrapper",
    "ConnectionResolver",
    "ConnectionCandidate",
    "CandidateKind",
    "ProbeResult",
    "DockerViewError",
    "ConfigurationError",
    "DaemonConnectionError",
    "NoDaemonFoundError",
    "ContainerError",
    "ContainerListError",
    "ContainerStatsError",
    "StatsDecodeError",
]
