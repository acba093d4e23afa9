"""Logging setup for the service process.

One stream handler is installed on the root logger, using either a plain text
formatter or a JSON formatter for log collectors.
"""

import json
import logging
from datetime import datetime, timezone

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_EXTRA_FIELDS = ("method", "path", "status_code", "missing_keys", "target")


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = record.__dict__.get(key)
            if value is not None:
                log[key] = value
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def observability_configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure root logging for the process.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Logging level name.
        fmt: `json` for structured output, anything else for text.

    Returns:
        None: Logging is configured as a side effect.
    """

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_tianguistore_handler", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._tianguistore_handler = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
