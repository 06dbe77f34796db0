"""
Discovery of a reachable Docker daemon.

Candidates are tried in a fixed order and the first one answering a ping
wins:

1. The explicit override (``DOCKER_HOST``, config file or ``--host``)
2. Well-known platform endpoints (named pipes on Windows, sockets elsewhere)
3. The Docker CLI's current context, when it is not ``default``
4. The ambient environment via ``docker.from_env()``, unless the
   ``DOCKER_HOST`` it would read was already probed

Candidate lists are plain data so each platform can be inspected and tested
without a daemon.
"""

import logging
import os
import platform
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from docker.errors import TLSParameterError
from docker.tls import TLSConfig

from dockerview.config import DockerSettings

from .client import DockerClientWrapper
from .contexts import current_context_host
from .exceptions import ConfigurationError, DaemonConnectionError, NoDaemonFoundError

logger = logging.getLogger(__name__)


class CandidateKind(str, Enum):
    """Origin of a connection candidate."""

    OVERRIDE = "override"
    NAMED_PIPE = "named_pipe"
    UNIX_SOCKET = "unix_socket"
    DOCKER_CONTEXT = "docker_context"
    AMBIENT_ENV = "ambient_env"


@dataclass(frozen=True)
class ConnectionCandidate:
    """
    One daemon address to probe.

    Parameters
    ----------
    kind : CandidateKind
        Where the address came from
    address : str, optional
        Daemon base URL; None means "let the SDK read the environment"
    label : str
        Human-readable name shown in diagnostics
    """

    kind: CandidateKind
    address: str | None
    label: str


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing one candidate."""

    candidate: ConnectionCandidate
    ok: bool
    error: str | None = None


WINDOWS_PIPES: tuple[tuple[str, str], ...] = (
    ("Docker Engine", "npipe:////./pipe/docker_engine"),
    ("Docker Desktop (WSL2)", "npipe:////./pipe/dockerDesktopLinuxEngine"),
    ("Podman machine", "npipe:////./pipe/podman-machine-default"),
    ("Rancher Desktop", "npipe:////./pipe/rancher_desktop"),
)

SYSTEM_SOCKET = "/var/run/docker.sock"

# Relative to the user's home directory
DESKTOP_SOCKETS: tuple[tuple[str, str], ...] = (
    ("Colima", ".colima/default/docker.sock"),
    ("Colima (legacy)", ".colima/docker.sock"),
    ("OrbStack", ".orbstack/run/docker.sock"),
    ("Docker Desktop", ".docker/run/docker.sock"),
    ("Docker Desktop (Linux)", ".docker/desktop/docker.sock"),
)

RANCHER_DESKTOP_SOCKET = ".rd/docker.sock"


def unix_candidate(label: str, path: Path | str) -> ConnectionCandidate:
    return ConnectionCandidate(CandidateKind.UNIX_SOCKET, f"unix://{path}", label)


def windows_candidates() -> list[ConnectionCandidate]:
    """Well-known named pipes, native engine first."""
    return [
        ConnectionCandidate(CandidateKind.NAMED_PIPE, address, label)
        for label, address in WINDOWS_PIPES
    ]


def posix_candidates(system: str, home: Path, uid: int | None) -> list[ConnectionCandidate]:
    """
    Socket candidates for Linux, macOS and other POSIX systems.

    Parameters
    ----------
    system : str
        ``platform.system()`` value (``"Linux"``, ``"Darwin"`` ...)
    home : Path
        User home directory
    uid : int, optional
        Numeric user id, used for rootless runtime sockets on Linux

    Returns
    -------
    list[ConnectionCandidate]
        System socket, desktop VM sockets, OS-specific alternatives, then
        the Rancher Desktop socket.
    """
    candidates = [unix_candidate("System socket", SYSTEM_SOCKET)]
    candidates.extend(unix_candidate(label, home / rel) for label, rel in DESKTOP_SOCKETS)

    if system == "Linux":
        if uid is not None:
            candidates.append(unix_candidate("Rootless Docker", f"/run/user/{uid}/docker.sock"))
            candidates.append(
                unix_candidate("Rootless Podman", f"/run/user/{uid}/podman/podman.sock")
            )
        candidates.append(unix_candidate("Podman", "/run/podman/podman.sock"))
    elif system == "Darwin":
        candidates.append(
            unix_candidate(
                "Podman machine",
                home / ".local/share/containers/podman/machine/podman.sock",
            )
        )

    candidates.append(unix_candidate("Rancher Desktop", home / RANCHER_DESKTOP_SOCKET))
    return candidates


def _dedupe(candidates: list[ConnectionCandidate]) -> list[ConnectionCandidate]:
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.address is not None:
            if candidate.address in seen:
                continue
            seen.add(candidate.address)
        unique.append(candidate)
    return unique


ClientFactory = Callable[[ConnectionCandidate], DockerClientWrapper]


class ConnectionResolver:
    """
    Finds the first Docker daemon that answers a liveness probe.

    Parameters
    ----------
    settings : DockerSettings
        Override host, TLS and timeout settings
    client_factory : callable, optional
        Builds a connected client for a candidate or raises
        ``DaemonConnectionError``; defaults to ``DockerClientWrapper``
    system : str, optional
        Platform name (default: ``platform.system()``)
    home : Path, optional
        Home directory (default: ``Path.home()``)
    uid : int, optional
        Numeric user id (default: ``os.getuid()`` where available)
    environ : Mapping, optional
        Environment used for the CLI context lookup (default: ``os.environ``)

    Examples
    --------
    >>> resolver = ConnectionResolver(DockerSettings())
    >>> with resolver.resolve() as client:  # doctest: +SKIP
    ...     print(client.endpoint)
    http+docker://localhost
    """

    def __init__(
        self,
        settings: DockerSettings,
        client_factory: ClientFactory | None = None,
        system: str | None = None,
        home: Path | None = None,
        uid: int | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.settings = settings
        self.system = system or platform.system()
        self.home = home or Path.home()
        if uid is None and hasattr(os, "getuid"):
            uid = os.getuid()
        self.uid = uid
        self.environ = os.environ if environ is None else environ
        self._client_factory = client_factory or self._default_client
        self.resolved: ConnectionCandidate | None = None

    def platform_candidates(self) -> list[ConnectionCandidate]:
        """Fixed candidates for the current platform."""
        if self.system == "Windows":
            return windows_candidates()
        return posix_candidates(self.system, self.home, self.uid)

    def candidates(self) -> list[ConnectionCandidate]:
        """Full probe order, duplicates removed."""
        ordered: list[ConnectionCandidate] = []

        if self.settings.docker_host:
            ordered.append(
                ConnectionCandidate(
                    CandidateKind.OVERRIDE, self.settings.docker_host, "DOCKER_HOST override"
                )
            )

        ordered.extend(self.platform_candidates())

        context = current_context_host(self.environ, self.home)
        if context is not None:
            name, host = context
            ordered.append(
                ConnectionCandidate(CandidateKind.DOCKER_CONTEXT, host, f"Docker context '{name}'")
            )

        unique = _dedupe(ordered)

        # from_env() connects to DOCKER_HOST when set; skip it if already probed
        ambient_host = (self.environ.get("DOCKER_HOST") or "").strip()
        if not ambient_host or ambient_host not in {c.address for c in unique}:
            unique.append(ConnectionCandidate(CandidateKind.AMBIENT_ENV, None, "Environment"))
        return unique

    def _tls_config(self) -> TLSConfig | None:
        if not self.settings.docker_tls_verify:
            return None
        cert_path = self.settings.docker_cert_path or (self.home / ".docker")
        try:
            return TLSConfig(
                client_cert=(str(cert_path / "cert.pem"), str(cert_path / "key.pem")),
                ca_cert=str(cert_path / "ca.pem"),
                verify=True,
            )
        except TLSParameterError as e:
            raise ConfigurationError(
                "Invalid TLS configuration",
                details={"error": str(e), "cert_path": str(cert_path)},
            ) from e

    def _default_client(self, candidate: ConnectionCandidate) -> DockerClientWrapper:
        tls = self._tls_config() if candidate.kind is CandidateKind.OVERRIDE else None
        return DockerClientWrapper(
            base_url=candidate.address,
            tls=tls,
            timeout=self.settings.request_timeout_seconds,
            ping_timeout=self.settings.ping_timeout_seconds,
        )

    def probe(self, candidate: ConnectionCandidate) -> DockerClientWrapper:
        """
        Connect to one candidate.

        Raises
        ------
        DaemonConnectionError
            If the client cannot be built or the ping fails
        ConfigurationError
            If the TLS settings for the override are unusable
        """
        logger.debug(f"Probing {candidate.label} ({candidate.address or 'environment'})")
        return self._client_factory(candidate)

    def resolve(self) -> DockerClientWrapper:
        """
        Return a connected client for the first reachable candidate.

        Raises
        ------
        NoDaemonFoundError
            If every candidate failed its probe
        ConfigurationError
            If the TLS settings for the override are unusable
        """
        attempted: list[str] = []
        for candidate in self.candidates():
            attempted.append(candidate.label)
            try:
                client = self.probe(candidate)
            except DaemonConnectionError as e:
                logger.debug(f"{candidate.label} unavailable: {e.details.get('error', e)}")
                continue

            self.resolved = candidate
            logger.info(f"Using Docker daemon from {candidate.label}")
            return client

        raise NoDaemonFoundError(
            "No reachable Docker daemon found",
            details={"attempted": attempted, "platform": self.system},
        )

    def probe_all(self) -> list[ProbeResult]:
        """Probe every candidate without stopping at the first success."""
        results = []
        for candidate in self.candidates():
            try:
                client = self.probe(candidate)
            except DaemonConnectionError as e:
                results.append(ProbeResult(candidate, False, str(e.details.get("error", e))))
                continue
            client.close()
            results.append(ProbeResult(candidate, True))
        return results
