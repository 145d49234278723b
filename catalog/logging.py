"""
Logging for the catalog service.

One `catalog` logger with two outputs: the console (human-readable in
development, JSON elsewhere) and an error file in JSON. Every line carries
the request's correlation ID plus whatever `set_log_context` bound for the
request, such as the authenticated user.
"""

import json
import logging
import sys
from typing import Any

from catalog.constants import MAX_LOG_SIZE_BYTES
from catalog.middlewares.correlation_id import correlation_id, log_context
from catalog.settings import app_settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes of a bare LogRecord; anything else came in through `extra`
_STANDARD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "request_tag",
}


def set_log_context(**fields: Any) -> None:
    """
    Bind structured fields to every log line of the current request.

    The correlation middleware starts each request with an empty context,
    so fields never carry over from one request to the next.

    Args:
        **fields: Key-value pairs to add to the log context.

    Example:
        >>> set_log_context(user_id=1, username="mluukkai")
        >>> logger.info("Book added")  # Carries both fields
    """
    log_context.set({**log_context.get(), **fields})


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRIBUTES
    }


class StructuredJSONFormatter(logging.Formatter):
    """One JSON document per line, for log collectors and the error file."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if len(message) > MAX_LOG_SIZE_BYTES:
            message = message[:MAX_LOG_SIZE_BYTES] + "... [TRUNCATED]"

        document: dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "environment": app_settings.ENV.value,
        }

        cid = correlation_id.get()
        if cid:
            document["request_id"] = cid

        document.update(log_context.get())
        document.update(_extra_fields(record))

        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)

        # Non-JSON extras (sessions, models) are logged by their str()
        return json.dumps(document, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Console formatter for development.

    INFO lines stay short; every other level adds the source location.
    The bracket holds the correlation ID followed by any bound request
    fields, e.g. `[1a2b3c4d username=mluukkai]`.
    """

    BRIEF_FMT = "%(asctime)s [%(request_tag)s] %(levelname)s: %(message)s"
    DETAILED_FMT = (
        "%(asctime)s [%(request_tag)s] %(levelname)s: "
        "%(module)s.%(funcName)s:%(lineno)d - %(message)s"
    )

    def __init__(self) -> None:
        super().__init__()
        self._brief = logging.Formatter(self.BRIEF_FMT, DATE_FORMAT)
        self._detailed = logging.Formatter(self.DETAILED_FMT, DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        tag = [correlation_id.get() or "-"]
        tag.extend(f"{key}={value}" for key, value in log_context.get().items())
        record.request_tag = " ".join(tag)

        if record.levelno == logging.INFO:
            return self._brief.format(record)
        return self._detailed.format(record)


def setup_logging() -> logging.Logger:
    """
    Configure the `catalog` logger.

    Handlers are replaced rather than stacked, so a reload does not
    duplicate output.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger("catalog")
    logger.setLevel(app_settings.LOG_LEVEL.upper())
    logger.propagate = False
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    if app_settings.LOG_CONSOLE_FORMAT.lower() == "human":
        console.setFormatter(HumanReadableFormatter())
    else:
        console.setFormatter(StructuredJSONFormatter())
    logger.addHandler(console)

    try:
        error_file = logging.FileHandler(app_settings.LOG_FILE_PATH)
    except OSError as ex:
        # Missing log directory or no write permission
        logger.warning(f"Error log file disabled: {ex}")
    else:
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(StructuredJSONFormatter())
        logger.addHandler(error_file)

    return logger


logger = setup_logging()
