"""Tests for docker_handler.client module."""

from unittest.mock import Mock

import pytest
from docker.errors import APIError, DockerException, NotFound
from requests.exceptions import ReadTimeout

from dockerview.docker_handler.client import DockerClientWrapper
from dockerview.docker_handler.exceptions import (
    ContainerListError,
    ContainerStatsError,
    DaemonConnectionError,
)


class TestDockerClientWrapperInit:
    """Tests for DockerClientWrapper initialization."""

    def test_init_default_parameters(self, mock_docker_from_env):
        """Test initialization with default parameters."""
        client = DockerClientWrapper()
        assert client.base_url is None
        assert client.tls is None
        assert client.timeout == 10
        assert client.ping_timeout == 3.0
        assert client.kwargs == {}

    def test_init_with_base_url(self, mock_docker_client_class):
        """Test initialization with base_url."""
        client = DockerClientWrapper(base_url="tcp://192.168.1.100:2375")
        assert client.base_url == "tcp://192.168.1.100:2375"

    def test_init_calls_ping(self, mock_docker_from_env):
        """Test that initialization pings Docker daemon."""
        DockerClientWrapper()
        mock_docker_from_env.ping.assert_called_once()

    def test_probe_uses_ping_timeout(self, monkeypatch, mock_docker_client):
        """Test the client is built with the probe deadline."""
        import docker

        captured = {}

        def mock_docker_client_init(*args, **kwargs):
            captured.update(kwargs)
            return mock_docker_client

        monkeypatch.setattr(docker, "DockerClient", mock_docker_client_init)

        DockerClientWrapper(base_url="unix:///var/run/docker.sock", ping_timeout=0.5)

        assert captured["timeout"] == 0.5
        assert captured["base_url"] == "unix:///var/run/docker.sock"

    def test_request_timeout_applied_after_ping(self, mock_docker_from_env):
        """Test the request timeout replaces the probe deadline once connected."""
        DockerClientWrapper(timeout=30, ping_timeout=1.0)
        assert mock_docker_from_env.api.timeout == 30

    def test_init_with_connection_error(self, monkeypatch):
        """Test initialization when Docker connection fails."""
        import docker

        def mock_from_env(*args, **kwargs):
            raise DockerException("Connection refused")

        monkeypatch.setattr(docker, "from_env", mock_from_env)

        with pytest.raises(DaemonConnectionError) as exc_info:
            DockerClientWrapper()

        assert "Cannot connect to Docker daemon" in str(exc_info.value)
        assert "error" in exc_info.value.details

    def test_init_ping_failure_closes_client(self, mock_docker_client_class):
        """Test a client that fails its ping is closed before raising."""
        mock_docker_client_class.ping.side_effect = DockerException("Connection refused")

        with pytest.raises(DaemonConnectionError):
            DockerClientWrapper(base_url="unix:///missing.sock")

        mock_docker_client_class.close.assert_called_once()

    def test_init_ping_timeout(self, mock_docker_client_class):
        """Test a ping that times out counts as unreachable."""
        mock_docker_client_class.ping.side_effect = ReadTimeout("timed out")

        with pytest.raises(DaemonConnectionError) as exc_info:
            DockerClientWrapper(base_url="tcp://10.0.0.1:2375")

        assert exc_info.value.details["base_url"] == "tcp://10.0.0.1:2375"


class TestDockerClientWrapperConnection:
    """Tests for Docker client connection management."""

    def test_client_property_connects_if_none(self, mock_docker_from_env):
        """Test that client property connects if _client is None."""
        wrapper = DockerClientWrapper()
        wrapper._client = None
        client = wrapper.client
        assert client is not None

    def test_client_property_raises_if_client_none_after_connect(self, monkeypatch):
        """Test client property raises if _client is None after _connect()."""
        wrapper = DockerClientWrapper.__new__(DockerClientWrapper)
        wrapper._client = None
        wrapper.base_url = None
        wrapper.tls = None
        wrapper.timeout = 10
        wrapper.ping_timeout = 3.0
        wrapper.kwargs = {}

        def mock_connect(self):
            pass  # Leaves _client as None

        monkeypatch.setattr(DockerClientWrapper, "_connect", mock_connect)

        with pytest.raises(DaemonConnectionError) as exc_info:
            _ = wrapper.client

        assert "Docker client not initialized" in str(exc_info.value)

    def test_endpoint(self, mock_docker_from_env):
        """Test endpoint reports the API base URL."""
        wrapper = DockerClientWrapper()
        assert wrapper.endpoint == "http+docker://localhost"


class TestDockerClientWrapperListRunning:
    """Tests for list_running method."""

    def test_list_running(self, mock_docker_from_env, container_summary):
        """Test listing running containers returns daemon summaries."""
        summaries = [container_summary(), container_summary(container_id="f" * 64)]
        mock_docker_from_env.api.containers.return_value = summaries

        client = DockerClientWrapper()

        assert client.list_running() == summaries
        mock_docker_from_env.api.containers.assert_called_once_with()

    def test_list_running_empty(self, mock_docker_from_env):
        """Test listing containers when none are running."""
        mock_docker_from_env.api.containers.return_value = []

        client = DockerClientWrapper()

        assert client.list_running() == []

    def test_list_running_api_error(self, mock_docker_from_env):
        """Test list_running with API error."""
        mock_docker_from_env.api.containers.side_effect = APIError("API error")

        client = DockerClientWrapper()

        with pytest.raises(ContainerListError) as exc_info:
            client.list_running()

        assert "Failed to list containers" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, APIError)

    def test_list_running_timeout(self, mock_docker_from_env):
        """Test list_running wraps transport timeouts."""
        mock_docker_from_env.api.containers.side_effect = ReadTimeout("timed out")

        client = DockerClientWrapper()

        with pytest.raises(ContainerListError):
            client.list_running()


class TestDockerClientWrapperStatsSnapshot:
    """Tests for stats_snapshot method."""

    def test_stats_snapshot(self, mock_docker_from_env, stats_payload):
        """Test a non-streaming stats call."""
        payload = stats_payload()
        mock_docker_from_env.api.stats.return_value = payload

        client = DockerClientWrapper()

        assert client.stats_snapshot("abc123") == payload
        mock_docker_from_env.api.stats.assert_called_once_with("abc123", stream=False)

    def test_stats_snapshot_not_found(self, mock_docker_from_env):
        """Test stats for a container that exited after listing."""
        mock_docker_from_env.api.stats.side_effect = NotFound("No such container")

        client = DockerClientWrapper()

        with pytest.raises(ContainerStatsError) as exc_info:
            client.stats_snapshot("gone")

        assert "gone" in str(exc_info.value)
        assert "operation" in exc_info.value.details

    def test_stats_snapshot_timeout(self, mock_docker_from_env):
        """Test stats call timing out."""
        mock_docker_from_env.api.stats.side_effect = ReadTimeout("timed out")

        client = DockerClientWrapper()

        with pytest.raises(ContainerStatsError):
            client.stats_snapshot("slow")

    def test_stats_snapshot_invalid_id(self, mock_docker_from_env):
        """Test an ID the SDK rejects before sending a request."""
        mock_docker_from_env.api.stats.side_effect = ValueError("Expected a string")

        client = DockerClientWrapper()

        with pytest.raises(ContainerStatsError) as exc_info:
            client.stats_snapshot(None)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert "Expected a string" in exc_info.value.details["error"]


class TestDockerClientWrapperPing:
    """Tests for ping method."""

    def test_ping_success(self, mock_docker_from_env):
        """Test successful ping."""
        client = DockerClientWrapper()
        assert client.ping() is True

    def test_ping_failure(self, mock_docker_from_env):
        """Test ping when Docker daemon is unreachable."""
        client = DockerClientWrapper()

        mock_docker_from_env.ping.side_effect = DockerException("Connection refused")
        result = client.ping()

        assert result is False


class TestDockerClientWrapperHandleErrors:
    """Tests for handle_errors context manager."""

    def test_handle_errors_success(self, mock_docker_from_env):
        """Test handle_errors with successful operation."""
        client = DockerClientWrapper()

        with client.handle_errors("test operation"):
            pass

    def test_handle_errors_api_error(self, mock_docker_from_env):
        """Test handle_errors with APIError."""
        client = DockerClientWrapper()

        with (
            pytest.raises(ContainerStatsError) as exc_info,
            client.handle_errors("reading stats"),
        ):
            raise APIError("Permission denied")

        assert "reading stats" in str(exc_info.value)

    def test_handle_errors_docker_exception(self, mock_docker_from_env):
        """Test handle_errors with generic DockerException."""
        client = DockerClientWrapper()

        with pytest.raises(ContainerStatsError) as exc_info, client.handle_errors("docker op"):
            raise DockerException("Generic error")

        assert "docker op" in str(exc_info.value)


class TestDockerClientWrapperContextManager:
    """Tests for context manager protocol and close."""

    def test_context_manager_calls_close(self, mock_docker_from_env):
        """Test that context manager calls close on exit."""
        mock_docker_from_env.close = Mock()

        with DockerClientWrapper():
            pass

        mock_docker_from_env.close.assert_called_once()

    def test_context_manager_with_exception(self, mock_docker_from_env):
        """Test context manager cleanup when exception occurs."""
        mock_docker_from_env.close = Mock()

        with pytest.raises(ValueError), DockerClientWrapper():
            raise ValueError("Test error")

        mock_docker_from_env.close.assert_called_once()

    def test_close_when_client_none(self, mock_docker_from_env):
        """Test closing when client is None."""
        client = DockerClientWrapper()
        client._client = None

        client.close()
        assert client._client is None

    def test_close_twice(self, mock_docker_from_env):
        """Test closing is idempotent."""
        mock_docker_from_env.close = Mock()

        client = DockerClientWrapper()
        client.close()
        client.close()

        mock_docker_from_env.close.assert_called_once()
