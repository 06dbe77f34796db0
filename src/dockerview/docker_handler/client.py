"""Docker client wrapper with connection management and error handling."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from types import TracebackType
from typing import Any

import docker
from docker import DockerClient as _DockerClient
from docker.errors import APIError, DockerException, NotFound
from requests.exceptions import RequestException

from .exceptions import (
    ContainerListError,
    ContainerStatsError,
    DaemonConnectionError,
)

logger = logging.getLogger(__name__)


class DockerClientWrapper:
    """
    Wrapper around the Docker SDK client used by the dashboard.

    The daemon is pinged with a short deadline while connecting; once it
    answers, later requests use the regular request timeout.
    """

    _client: _DockerClient | None = None

    def __init__(
        self,
        base_url: str | None = None,
        tls: Any | None = None,
        timeout: int = 10,
        ping_timeout: float = 3.0,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Docker client wrapper.

        Args:
            base_url: Docker daemon URL (default: from environment)
            tls: TLS configuration
            timeout: Request timeout in seconds once connected
            ping_timeout: Deadline for the liveness probe in seconds
            **kwargs: Additional Docker client parameters
        """
        self.base_url = base_url
        self.tls = tls
        self.timeout = timeout
        self.ping_timeout = ping_timeout
        self.kwargs = kwargs
        self._connect()

    def _connect(self) -> None:
        """Establish connection to Docker daemon."""
        client: _DockerClient | None = None
        try:
            if self.base_url:
                client = docker.DockerClient(
                    base_url=self.base_url,
                    tls=self.tls,
                    timeout=self.ping_timeout,
                    **self.kwargs,
                )
            else:
                # Use environment variables or defaults
                client = docker.from_env(timeout=self.ping_timeout, **self.kwargs)

            # Verify connection
            client.ping()
        except (DockerException, RequestException) as e:
            if client is not None:
                client.close()
            logger.debug(f"Docker daemon not reachable at {self.base_url or 'environment'}: {e}")
            raise DaemonConnectionError(
                "Cannot connect to Docker daemon",
                details={"error": str(e), "base_url": self.base_url},
            ) from e

        client.api.timeout = self.timeout
        self._client = client
        logger.info(f"Connected to Docker daemon at {client.api.base_url}")

    @property
    def client(self) -> _DockerClient:
        """Get the underlying Docker client."""
        if self._client is None:
            self._connect()
        if self._client is None:
            raise DaemonConnectionError(
                "Docker client not initialized",
                details={"base_url": self.base_url},
            )
        return self._client

    @property
    def endpoint(self) -> str:
        """Base URL the underlying API client talks to."""
        return str(self.client.api.base_url)

    def list_running(self) -> list[dict[str, Any]]:
        """
        List running containers.

        Returns:
            Container summaries as returned by the daemon (``Id``, ``Names``,
            ``State``, ``Status`` ...), in daemon order

        Raises:
            ContainerListError: If the listing call fails
        """
        try:
            return self.client.api.containers()  # type: ignore[no-any-return]
        except (DockerException, RequestException) as e:
            raise ContainerListError(
                f"Failed to list containers: {e}", details={"error": str(e)}
            ) from e

    def stats_snapshot(self, container_id: str) -> dict[str, Any]:
        """
        Fetch a single stats payload for a container.

        The daemon samples twice before answering, so the payload carries
        both ``cpu_stats`` and ``precpu_stats``.

        Args:
            container_id: Container ID or name

        Returns:
            Raw stats dictionary

        Raises:
            ContainerStatsError: If the container vanished or the call failed
        """
        with self.handle_errors(f"reading stats of {container_id}"):
            return self.client.api.stats(container_id, stream=False)  # type: ignore[no-any-return]

    def ping(self) -> bool:
        """
        Check if Docker daemon is reachable.

        Returns:
            True if daemon responds
        """
        try:
            return self.client.ping()  # type: ignore[no-any-return]
        except (DockerException, RequestException):
            return False

    @contextmanager
    def handle_errors(self, operation: str) -> Generator[None, None, None]:
        """
        Context manager translating SDK errors into ``ContainerStatsError``.

        Args:
            operation: Description of operation being performed

        Yields:
            None
        """
        try:
            yield
        except NotFound as e:
            raise ContainerStatsError(
                f"Container not found during {operation}",
                details={"operation": operation, "error": str(e)},
            ) from e
        except APIError as e:
            raise ContainerStatsError(
                f"Docker API error during {operation}: {e}",
                details={"operation": operation, "error": str(e)},
            ) from e
        except (DockerException, RequestException) as e:
            raise ContainerStatsError(
                f"Docker error during {operation}: {e}",
                details={"operation": operation, "error": str(e)},
            ) from e
        except (ValueError, TypeError) as e:
            # The SDK validates IDs and builds URLs before any request is sent
            raise ContainerStatsError(
                f"Invalid request during {operation}: {e}",
                details={"operation": operation, "error": str(e)},
            ) from e

    def close(self) -> None:
        """Close connection to Docker daemon."""
        if self._client:
            self._client.close()
            self._client = None
            logger.info("Closed Docker client connection")

    def __enter__(self) -> "DockerClientWrapper":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()

    def __del__(self) -> None:
        """Cleanup on deletion."""
        self.close()
