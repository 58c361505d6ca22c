"""Process-wide logging setup for the Scout server and CLI."""

from __future__ import annotations

import json
import logging
import sys


class CloudFormatter(logging.Formatter):
    """JSON formatter emitting Cloud Logging-compatible entries::

        {"severity": "INFO", "message": "...", "logger": "...", "time": "..."}
    """

    _LEVEL_MAP = {
        "DEBUG": "DEBUG",
        "INFO": "INFO",
        "WARNING": "WARNING",
        "ERROR": "ERROR",
        "CRITICAL": "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object with severity."""
        entry = {
            "severity": self._LEVEL_MAP.get(record.levelname, "DEFAULT"),
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", env: str = "local") -> None:
    """Set up root logging.

    Outside ``local`` the output is one JSON object per line so a log
    collector can parse severity; locally it is plain text.

    Args:
        level: Log level name (``DEBUG``, ``INFO``, ...).
        env: Deployment environment name.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if env != "local":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CloudFormatter())
        logging.root.handlers.clear()
        logging.root.addHandler(handler)
        logging.root.setLevel(log_level)
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            stream=sys.stderr,
        )

    # Quieten noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
