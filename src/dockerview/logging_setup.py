"""Logging configuration for the dockerview CLI."""

import json
import logging
from datetime import UTC, datetime

from rich.console import Console
from rich.logging import RichHandler

from dockerview.config import LoggingSettings


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(settings: LoggingSettings, console: Console | None = None) -> logging.Handler:
    """
    Install a single handler on the ``dockerview`` logger.

    Parameters
    ----------
    settings : LoggingSettings
        Level, format and optional file
    console : Console, optional
        Console shared with the live display; console-format logs go through
        it so they are printed above the table

    Returns
    -------
    logging.Handler
        The installed handler
    """
    handler: logging.Handler
    if settings.log_file is not None:
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        if settings.log_format == "console":
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
    elif settings.log_format == "console":
        handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    else:
        handler = logging.StreamHandler()

    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())

    logger = logging.getLogger("dockerview")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    return handler
