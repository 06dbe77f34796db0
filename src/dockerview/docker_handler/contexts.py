"""Lookup of the Docker CLI's current context endpoint.

The ``docker`` CLI stores contexts under ``$DOCKER_CONFIG/contexts/meta``, one
directory per context named after the SHA-256 of the context name. Reading the
metadata directly avoids shelling out to ``docker context inspect``.
"""

import hashlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "default"


def docker_config_dir(environ: Mapping[str, str] | None = None, home: Path | None = None) -> Path:
    """Directory of the Docker CLI configuration (``~/.docker`` by default)."""
    environ = os.environ if environ is None else environ
    if environ.get("DOCKER_CONFIG"):
        return Path(environ["DOCKER_CONFIG"])
    return (home or Path.home()) / ".docker"


def current_context_name(config_dir: Path, environ: Mapping[str, str] | None = None) -> str:
    """
    Name of the active CLI context.

    ``DOCKER_CONTEXT`` wins over ``currentContext`` in ``config.json``.
    Unreadable configuration falls back to ``"default"``.
    """
    environ = os.environ if environ is None else environ
    if environ.get("DOCKER_CONTEXT"):
        return environ["DOCKER_CONTEXT"]

    config_file = config_dir / "config.json"
    try:
        with open(config_file) as f:
            data = json.load(f)
    except FileNotFoundError:
        return DEFAULT_CONTEXT
    except (OSError, ValueError) as e:
        logger.debug(f"Ignoring unreadable Docker CLI config {config_file}: {e}")
        return DEFAULT_CONTEXT

    name = data.get("currentContext") if isinstance(data, dict) else None
    return name or DEFAULT_CONTEXT


def context_host(config_dir: Path, name: str) -> str | None:
    """Docker endpoint host stored for context ``name``, if any."""
    digest = hashlib.sha256(name.encode()).hexdigest()
    meta_file = config_dir / "contexts" / "meta" / digest / "meta.json"
    try:
        with open(meta_file) as f:
            meta = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug(f"Ignoring unreadable context metadata {meta_file}: {e}")
        return None

    try:
        host = meta["Endpoints"]["docker"]["Host"]
    except (KeyError, TypeError):
        return None
    return host if isinstance(host, str) and host else None


def current_context_host(
    environ: Mapping[str, str] | None = None, home: Path | None = None
) -> tuple[str, str] | None:
    """
    Endpoint of the active non-default CLI context.

    Returns
    -------
    tuple[str, str] or None
        ``(context_name, host)``, or None when the default context is active
        or its metadata has no docker endpoint.

    Examples
    --------
    >>> current_context_host(environ={"DOCKER_CONTEXT": "default"})
    """
    config_dir = docker_config_dir(environ, home)
    name = current_context_name(config_dir, environ)
    if name == DEFAULT_CONTEXT:
        return None

    host = context_host(config_dir, name)
    if host is None:
        logger.debug(f"Docker context '{name}' has no docker endpoint")
        return None
    return name, host
