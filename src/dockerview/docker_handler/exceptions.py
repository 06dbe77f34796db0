"""Custom exceptions for the dockerview daemon pipeline."""

from typing import Any


class DockerViewError(Exception):
    """Base exception for all dockerview errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Configuration errors
class ConfigurationError(DockerViewError):
    """Raised when settings are invalid, such as unusable TLS certificate files."""

    pass


# Connection errors
class DaemonConnectionError(DockerViewError):
    """Base exception for failures reaching the Docker daemon."""

    pass


class NoDaemonFoundError(DaemonConnectionError):
    """Raised when every discovery candidate failed its liveness probe."""

    pass


# Container operation errors
class ContainerError(DockerViewError):
    """Base exception for container-related errors."""

    pass


class ContainerListError(ContainerError):
    """Raised when the running-container listing fails. Fatal for one cycle."""

    pass


class ContainerStatsError(ContainerError):
    """Raised when one container's stats snapshot cannot be fetched."""

    pass


class StatsDecodeError(ContainerStatsError):
    """Raised when a stats payload is malformed."""

    pass
