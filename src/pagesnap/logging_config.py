"""Process-level logging setup for the pagesnap CLI and server."""

from __future__ import annotations

import json
import logging
import sys

from pagesnap.settings import Settings, get_settings


class JsonFormatter(logging.Formatter):
    """JSON formatter emitting one structured entry per line.

    Managed log collectors (Cloud Logging, CloudWatch) parse ``severity``
    out of entries like::

        {"severity": "INFO", "message": "...", "logger": "...", "time": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(settings: Settings | None = None) -> None:
    """Set up the root logger.

    Emits JSON lines when ``json_logs`` is on or the environment is not
    ``local``; otherwise a human-readable plain-text format.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    if settings.json_logs or settings.env != "local":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logging.root.handlers.clear()
        logging.root.addHandler(handler)
        logging.root.setLevel(level)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            stream=sys.stderr,
            force=True,
        )

    # Quieten noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
