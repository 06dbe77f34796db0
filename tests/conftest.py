"""Pytest configuration and shared fixtures."""

import logging
from typing import Any
from unittest.mock import MagicMock, Mock

import pytest

ENV_VARS = (
    "DOCKER_HOST",
    "DOCKER_TLS_VERIFY",
    "DOCKER_CERT_PATH",
    "DOCKER_CONTEXT",
    "DOCKER_CONFIG",
    "DOCKERVIEW_POLL_INTERVAL_SECONDS",
    "DOCKERVIEW_REFRESH_PER_SECOND",
    "DOCKERVIEW_LOG_LEVEL",
    "DOCKERVIEW_LOG_FORMAT",
    "DOCKERVIEW_LOG_FILE",
    "PING_TIMEOUT_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's Docker environment out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_docker_client():
    """Create a mock Docker client."""
    client = MagicMock()
    client.ping.return_value = True
    client.api.base_url = "http+docker://localhost"
    return client


@pytest.fixture
def mock_docker_from_env(monkeypatch, mock_docker_client):
    """Mock docker.from_env to return a mock client."""
    import docker

    def mock_from_env(*args, **kwargs):
        return mock_docker_client

    monkeypatch.setattr(docker, "from_env", mock_from_env)
    return mock_docker_client


@pytest.fixture
def mock_docker_client_class(monkeypatch, mock_docker_client):
    """Mock docker.DockerClient class."""
    import docker

    def mock_docker_client_init(*args, **kwargs):
        return mock_docker_client

    monkeypatch.setattr(docker, "DockerClient", mock_docker_client_init)
    return mock_docker_client


def build_stats_payload(
    cpu_total: int = 1_500_000_000,
    precpu_total: int = 1_000_000_000,
    system: int = 12_000_000_000,
    presystem: int = 10_000_000_000,
    online_cpus: int | None = 4,
    memory_usage: int = 1024 * 1024,
    memory_limit: int = 1024 * 1024 * 1024,
    blkio: list[dict[str, Any]] | None = None,
    networks: dict[str, dict[str, int]] | None = None,
) -> dict[str, Any]:
    """Build a stats payload shaped like the Docker Engine API response."""
    cpu_stats: dict[str, Any] = {
        "cpu_usage": {"total_usage": cpu_total},
        "system_cpu_usage": system,
    }
    if online_cpus is not None:
        cpu_stats["online_cpus"] = online_cpus

    return {
        "read": "2025-01-02T10:00:01.000000000Z",
        "preread": "2025-01-02T10:00:00.000000000Z",
        "cpu_stats": cpu_stats,
        "precpu_stats": {
            "cpu_usage": {"total_usage": precpu_total},
            "system_cpu_usage": presystem,
            "online_cpus": online_cpus or 0,
        },
        "memory_stats": {"usage": memory_usage, "limit": memory_limit},
        "blkio_stats": {"io_service_bytes_recursive": blkio},
        "networks": networks if networks is not None else {"eth0": {"rx_bytes": 0, "tx_bytes": 0}},
    }


@pytest.fixture
def stats_payload():
    """Factory for Docker stats payloads."""
    return build_stats_payload


@pytest.fixture
def container_summary():
    """Factory for container listing entries."""

    def make(
        container_id: str = "abc123def456789",
        name: str = "/web",
        state: str = "running",
        status: str = "Up 2 minutes",
    ) -> dict[str, Any]:
        return {
            "Id": container_id,
            "Names": [name],
            "Image": "nginx:latest",
            "State": state,
            "Status": status,
        }

    return make


@pytest.fixture
def mock_wrapper():
    """Mock DockerClientWrapper for collector and CLI tests."""
    wrapper = Mock()
    wrapper.list_running.return_value = []
    wrapper.endpoint = "http+docker://localhost"
    return wrapper


@pytest.fixture(autouse=True)
def reset_dockerview_logger():
    """Undo handlers installed by configure_logging."""
    yield
    logger = logging.getLogger("dockerview")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
