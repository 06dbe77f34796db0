"""
Configuration management for dockerview.

This module uses Pydantic Settings for environment-based configuration with
support for .env files and an optional YAML file. Configuration is organized
into logical sections:
- Docker daemon settings (standard ``DOCKER_*`` variables)
- Monitoring settings
- Logging settings

Tool-specific environment variables are prefixed with DOCKERVIEW_
(e.g., DOCKERVIEW_POLL_INTERVAL_SECONDS).
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DOCKER_HOST_SCHEMES = ("unix://", "tcp://", "http://", "https://", "npipe://", "ssh://")


class DockerSettings(BaseSettings):
    """
    Docker daemon connection settings.

    Parameters
    ----------
    docker_host : str, optional
        Explicit daemon URL. When unset, the platform discovery sequence runs.
    docker_tls_verify : bool
        Enable TLS verification for ``tcp://`` hosts
    docker_cert_path : Path, optional
        Directory holding ``ca.pem``, ``cert.pem`` and ``key.pem``
    ping_timeout_seconds : float
        Deadline for each liveness probe during discovery
    request_timeout_seconds : int
        Timeout for list and stats calls once connected

    Environment Variables
    ---------------------
    DOCKER_HOST : str
        Override Docker daemon URL
    DOCKER_TLS_VERIFY : bool
        Enable TLS
    DOCKER_CERT_PATH : str
        TLS certificate path

    Examples
    --------
    >>> config = DockerSettings(docker_host="tcp://localhost:2375")
    >>> config.docker_host
    'tcp://localhost:2375'
    >>> DockerSettings(docker_host="").docker_host is None
    True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    docker_host: str | None = Field(None, description="Docker daemon URL override")
    docker_tls_verify: bool = Field(default=False, description="Enable TLS verification")
    docker_cert_path: Path | None = Field(None, description="TLS certificate path")
    ping_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        le=60,
        description="Liveness probe deadline",
    )
    request_timeout_seconds: int = Field(
        default=10,
        ge=1,
        le=300,
        description="Request timeout",
    )

    @field_validator("docker_host")
    @classmethod
    def validate_docker_host(cls, v: str | None) -> str | None:
        """Validate Docker host URL format; blank means unset."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.startswith(DOCKER_HOST_SCHEMES):
            raise ValueError(
                f"Docker host must start with one of: {DOCKER_HOST_SCHEMES}. Got: {v}"
            )
        return v


class MonitoringSettings(BaseSettings):
    """
    Poll loop and display settings.

    Parameters
    ----------
    poll_interval_seconds : float
        Interval between collection cycles (seconds)
    refresh_per_second : int
        Dashboard redraws per second

    Environment Variables
    ---------------------
    DOCKERVIEW_POLL_INTERVAL_SECONDS : float
        Collection interval
    DOCKERVIEW_REFRESH_PER_SECOND : int
        Redraw rate

    Examples
    --------
    >>> config = MonitoringSettings()
    >>> config.poll_interval_seconds
    1.0
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DOCKERVIEW_",
    )

    poll_interval_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=60,
        description="Collection interval",
    )
    refresh_per_second: int = Field(
        default=4,
        ge=1,
        le=30,
        description="Dashboard redraw rate",
    )


class LoggingSettings(BaseSettings):
    """
    Logging configuration.

    Parameters
    ----------
    log_level : str
        Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    log_format : str
        Log format ("console", "json")
    log_file : Path, optional
        Log file path (None for the terminal)

    Examples
    --------
    >>> config = LoggingSettings()
    >>> config.log_level
    'WARNING'
    >>> config.log_format
    'console'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DOCKERVIEW_",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log format",
    )
    log_file: Path | None = Field(None, description="Log file path")


class DockerViewConfig(BaseSettings):
    """
    Main configuration aggregating all settings.

    Parameters
    ----------
    docker : DockerSettings
        Docker configuration
    monitoring : MonitoringSettings
        Poll loop configuration
    logging : LoggingSettings
        Logging configuration

    Examples
    --------
    >>> config = DockerViewConfig()
    >>> config.monitoring.refresh_per_second
    4
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DOCKERVIEW_",
    )

    docker: DockerSettings = Field(default_factory=DockerSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# =============================================================================
# Convenience functions
# =============================================================================


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}: {path}")
    return data


def load_config(
    config_file: Path | str | None = None,
    env_file: Path | str | None = None,
) -> DockerViewConfig:
    """
    Load configuration from environment, optional .env and optional YAML file.

    Values from the YAML file win over environment values, section by section.

    Parameters
    ----------
    config_file : Path or str, optional
        YAML file with ``docker``, ``monitoring`` and ``logging`` sections
    env_file : Path or str, optional
        Path to .env file (default: .env in current directory)

    Returns
    -------
    DockerViewConfig
        Loaded configuration

    Raises
    ------
    FileNotFoundError
        If ``config_file`` does not exist
    ValueError
        If ``config_file`` is not a YAML mapping or a value is invalid

    Examples
    --------
    >>> config = load_config()
    >>> config.docker.request_timeout_seconds
    10
    """
    overrides = _read_yaml(Path(config_file)) if config_file else {}
    env_kwargs: dict[str, Any] = {"_env_file": str(env_file)} if env_file else {}

    return DockerViewConfig(
        docker=DockerSettings(**env_kwargs, **(overrides.get("docker") or {})),
        monitoring=MonitoringSettings(**env_kwargs, **(overrides.get("monitoring") or {})),
        logging=LoggingSettings(**env_kwargs, **(overrides.get("logging") or {})),
    )
