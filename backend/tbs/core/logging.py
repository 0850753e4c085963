"""Logging setup for the tbs package"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any
import json
import logging
import sys
import traceback

from tbs.config import Settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}

_HANDLER_MARKER = "_tbs_handler"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including fields passed via ``extra``"""

    # Never written out, whatever the caller passes
    SENSITIVE_KEYS = {"password", "token", "refresh_token", "access_token", "secret", "authorization", "cookie"}

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key.lower() in self.SENSITIVE_KEYS:
                continue
            log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_obj, default=str)


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Attach handlers to the ``tbs`` logger

    Safe to call more than once; handlers from an earlier call are replaced.

    Args:
        settings: Application settings (LOG_LEVEL, LOG_FORMAT, LOG_FILE)

    Returns:
        The configured ``tbs`` logger
    """
    log = logging.getLogger("tbs")
    log.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for handler in list(log.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            log.removeHandler(handler)
            handler.close()

    if settings.LOG_FORMAT == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = settings.get_log_file()
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        log.addHandler(handler)

    return log
