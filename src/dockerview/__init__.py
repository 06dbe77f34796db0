"""DockerView - live terminal monitor for Docker containers."""

from dockerview.collector import ContainerCollector
from dockerview.config import (
    DockerSettings,
    DockerViewConfig,
    LoggingSettings,
    MonitoringSettings,
    load_config,
)
from dockerview.docker_handler import (
    ConnectionResolver,
    DockerClientWrapper,
    DockerViewError,
    NoDaemonFoundError,
)
from dockerview.formatting import format_bytes, format_percent
from dockerview.models import ContainerRecord, DecodedStats, PollSnapshot, RawStatsSnapshot
from dockerview.poller import Poller, PollState
from dockerview.stats import decode_stats

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Config
    "DockerViewConfig",
    "DockerSettings",
    "MonitoringSettings",
    "LoggingSettings",
    "load_config",
    # Docker
    "DockerClientWrapper",
    "ConnectionResolver",
    "DockerViewError",
    "NoDaemonFoundError",
    # Metrics
    "ContainerCollector",
    "decode_stats",
    "format_bytes",
    "format_percent",
    "ContainerRecord",
    "DecodedStats",
    "RawStatsSnapshot",
    "PollSnapshot",
    # Polling
    "Poller",
    "PollState",
]
